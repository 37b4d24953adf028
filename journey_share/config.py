import os
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

# Force-load .env from the project root
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(dotenv_path=BASE_DIR / ".env")


@dataclass(frozen=True)
class Settings:
    stripe_secret_key: str
    stripe_webhook_secret: str
    database_url: str = "sqlite:///./journeys.db"
    client_url: str = "http://localhost:3000"
    journey_price: int = 500                      # minor units (pence)
    journey_currency: str = "gbp"
    port: int = 8080
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        stripe_secret_key = os.getenv("STRIPE_SECRET_KEY")
        if not stripe_secret_key:
            raise RuntimeError("STRIPE_SECRET_KEY is not set. Check your .env file.")

        stripe_webhook_secret = os.getenv("STRIPE_WEBHOOK_SECRET")
        if not stripe_webhook_secret:
            raise RuntimeError("STRIPE_WEBHOOK_SECRET is not set. Check your .env file.")

        return cls(
            stripe_secret_key=stripe_secret_key,
            stripe_webhook_secret=stripe_webhook_secret,
            database_url=os.getenv("DATABASE_URL", cls.database_url),
            client_url=os.getenv("CLIENT_URL", cls.client_url).rstrip("/"),
            journey_price=int(os.getenv("JOURNEY_PRICE", cls.journey_price)),
            journey_currency=os.getenv("JOURNEY_CURRENCY", cls.journey_currency),
            port=int(os.getenv("PORT", cls.port)),
            log_level=os.getenv("LOG_LEVEL", cls.log_level).upper(),
        )
