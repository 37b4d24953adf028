"""
Error taxonomy for the journey share service.

Services raise these; the handlers registered by ``register_error_handlers``
turn every failure into a ``{"error": "..."}`` JSON body.
"""

import logging

import stripe
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class JourneyShareError(Exception):
    """Base exception carrying the HTTP status it maps to."""

    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        return {"error": self.message}


class ValidationError(JourneyShareError):
    status_code = 400


class NotFoundError(JourneyShareError):
    status_code = 404


class InvalidStateError(JourneyShareError):
    status_code = 400


class SignatureInvalidError(JourneyShareError):
    status_code = 400


class UpstreamInconsistencyError(JourneyShareError):
    """Stripe and the local store disagree, or a write after a verified event failed."""

    status_code = 500


async def _journey_share_error_handler(request: Request, exc: JourneyShareError):
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected request body for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


async def _stripe_error_handler(request: Request, exc: stripe.StripeError):
    logger.error(f"Stripe error on {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


async def _unhandled_error_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(JourneyShareError, _journey_share_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
    app.add_exception_handler(stripe.StripeError, _stripe_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)
