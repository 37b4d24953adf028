import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI

from journey_share import routes, webhooks
from journey_share.config import Settings
from journey_share.database import Base, make_engine, make_session_factory
from journey_share.errors import register_error_handlers
from journey_share.stripe_service import StripeGateway

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application with its own engine, session factory and Stripe
    gateway. Handlers reach them through the get_db / get_gateway dependencies.
    """
    settings = settings or Settings.from_env()

    app = FastAPI(title="Journey Share Service")

    engine = make_engine(settings.database_url)
    Base.metadata.create_all(bind=engine)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)
    app.state.gateway = StripeGateway(settings)

    register_error_handlers(app)

    # Webhook first: it reads the raw body itself
    app.include_router(webhooks.router)
    app.include_router(routes.router)

    @app.get("/")
    def root():
        return {"message": "Journey share server is running"}

    return app


def run():
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    logger.info(f"Starting server on port {settings.port}")
    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
