"""
Payment orchestration: checkout session creation, the Stripe webhook, and
the status poll the client uses right after the checkout redirect.

Only the webhook performs the unpaid -> paid transition. The status poll
reads Stripe's view of the session and the local journey without writing.
"""

import logging
import secrets
from typing import Optional

import stripe
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from journey_share.errors import (
    InvalidStateError, NotFoundError, SignatureInvalidError, UpstreamInconsistencyError,
    ValidationError,
)
from journey_share.journey_service import serialize_journey
from journey_share.models import Journey
from journey_share.stripe_service import StripeGateway

logger = logging.getLogger(__name__)

CHECKOUT_COMPLETED = "checkout.session.completed"


def generate_shareable_token() -> str:
    """32 random bytes, hex encoded (64 characters)."""
    return secrets.token_hex(32)


def _journey_id_from_metadata(session) -> Optional[str]:
    # Subscript access only: StripeObject is not a dict in current stripe releases
    try:
        return session["metadata"]["journeyId"] or None
    except (KeyError, TypeError, AttributeError):
        return None


def create_checkout_session(db: Session, gateway: StripeGateway, journey_id: str) -> dict:
    journey = db.get(Journey, journey_id)
    if journey is None:
        raise NotFoundError("Journey not found")
    if journey.paid:
        raise InvalidStateError("Journey is already paid for")

    session = gateway.create_checkout_session(journey.id, journey.title)
    logger.info(f"Created checkout session {session.id} for journey {journey.id}")

    return {"id": session.id}


def mark_journey_paid(db: Session, journey_id: str) -> bool:
    """
    Set paid=true with a fresh token in one conditional UPDATE.

    Journeys that are already paid with a token are left alone so a replayed
    webhook keeps the first token valid. Returns True when a row changed.
    """
    try:
        updated = (
            db.query(Journey)
            .filter(
                Journey.id == journey_id,
                or_(Journey.paid.is_(False), Journey.shareable_token.is_(None)),
            )
            .update(
                {Journey.paid: True, Journey.shareable_token: generate_shareable_token()},
                synchronize_session=False,
            )
        )
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"Error updating journey {journey_id} after payment: {e}")
        raise UpstreamInconsistencyError("Failed to update journey")

    if updated:
        logger.info(f"Journey {journey_id} marked as paid")
        return True

    if db.get(Journey, journey_id) is None:
        logger.error(f"Payment completed for unknown journey {journey_id}")
        raise UpstreamInconsistencyError("Failed to update journey")

    logger.info(f"Journey {journey_id} already paid, ignoring replayed event")
    return False


def handle_webhook(db: Session, gateway: StripeGateway, payload: bytes, signature: Optional[str]) -> dict:
    if not signature:
        raise SignatureInvalidError("Missing stripe-signature header")

    try:
        event = gateway.construct_event(payload, signature)
    except ValueError as e:
        logger.warning(f"[WEBHOOK] Invalid payload: {e}")
        raise SignatureInvalidError("Invalid signature")
    except stripe.SignatureVerificationError as e:
        logger.warning(f"[WEBHOOK] Invalid signature: {e}")
        raise SignatureInvalidError("Invalid signature")

    event_type = event["type"]
    if event_type == CHECKOUT_COMPLETED:
        session = event["data"]["object"]
        journey_id = _journey_id_from_metadata(session)
        if not journey_id:
            logger.error("[WEBHOOK] No journeyId found in session metadata")
            raise ValidationError("No journeyId in metadata")

        mark_journey_paid(db, journey_id)
    else:
        logger.info(f"[WEBHOOK] Unhandled event type: {event_type}")

    return {"received": True}


def check_checkout_session_status(db: Session, gateway: StripeGateway, session_id: str) -> dict:
    try:
        session = gateway.retrieve_checkout_session(session_id)
    except stripe.InvalidRequestError as e:
        if e.code == "resource_missing":
            raise NotFoundError("Checkout session not found")
        raise

    if session["payment_status"] != "paid":
        return {"status": "processing"}

    journey_id = _journey_id_from_metadata(session)
    if not journey_id:
        logger.error(f"No journeyId found in metadata of session {session_id}")
        raise UpstreamInconsistencyError("Invalid session metadata")

    journey = db.get(Journey, journey_id)
    if journey is None:
        logger.error(f"Journey {journey_id} not found after payment completion")
        raise UpstreamInconsistencyError("Journey not found")

    return {"status": "complete", "journey": serialize_journey(journey)}
