"""
Journey and stop operations plus the public-facing views of a journey.
"""

import logging
from typing import Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from journey_share.errors import NotFoundError, ValidationError
from journey_share.models import Journey, Stop
from journey_share.visuals import format_external_url, resolve_visual

logger = logging.getLogger(__name__)

PUBLIC_JOURNEY_LIMIT = 10
STOP_ORDER_ATTEMPTS = 3


def _require_title(title: Optional[str]) -> str:
    if title is None or title.strip() == "":
        raise ValidationError("Title is required")
    return title


def _sorted_stops(journey: Journey):
    return sorted(journey.stops, key=lambda stop: stop.order)


def serialize_stop(stop: Stop) -> dict:
    return {
        "id": stop.id,
        "title": stop.title,
        "note": stop.note,
        "image_url": stop.image_url,
        "icon_name": stop.icon_name,
        "external_url": stop.external_url,
        "order": stop.order,
    }


def serialize_journey(journey: Journey, include_token: bool = True) -> dict:
    """
    Full journey view. The shareable token is only exposed for a paid
    journey that actually has one, and never when include_token is False.
    """
    data = {
        "id": journey.id,
        "title": journey.title,
        "paid": journey.paid,
        "stops": [serialize_stop(stop) for stop in _sorted_stops(journey)],
    }
    if include_token and journey.paid and journey.shareable_token:
        data["shareableToken"] = journey.shareable_token
    return data


def create_public_journey_summary(journey: Journey) -> dict:
    """
    Public-safe summary of a journey: title, hero image and stop titles.

    Only these three keys are ever written, so notes, links, icons, ids,
    payment state and the token cannot appear in the result.
    """
    first_stop = next((stop for stop in journey.stops if stop.order == 1), None)
    hero_image_url = None
    if first_stop is not None and first_stop.image_url and first_stop.image_url.strip() != "":
        hero_image_url = first_stop.image_url

    return {
        "journeyTitle": journey.title,
        "heroImageUrl": hero_image_url,
        "highlights": [stop.title for stop in _sorted_stops(journey)],
    }


def _get_journey_or_404(db: Session, journey_id: str) -> Journey:
    journey = db.get(Journey, journey_id)
    if journey is None:
        raise NotFoundError("Journey not found")
    return journey


def create_journey(db: Session, title: Optional[str]) -> dict:
    title = _require_title(title)

    journey = Journey(title=title, paid=False)
    db.add(journey)
    db.commit()
    logger.info(f"Created journey {journey.id}")

    return {"id": journey.id, "title": journey.title}


def get_journey_by_id(db: Session, journey_id: str) -> dict:
    return serialize_journey(_get_journey_or_404(db, journey_id))


def reveal_journey_by_token(db: Session, token: str) -> dict:
    journey = db.query(Journey).filter(Journey.shareable_token == token).first()

    # Unknown token and unpaid journey must look the same to the caller
    if journey is None or not journey.paid:
        raise NotFoundError("Journey not found")

    return serialize_journey(journey, include_token=False)


def list_public_journeys(db: Session, limit: int = PUBLIC_JOURNEY_LIMIT) -> list:
    journeys = (
        db.query(Journey)
        .filter(Journey.paid.is_(True))
        .order_by(Journey.created_at.desc())
        .limit(limit)
        .all()
    )
    return [create_public_journey_summary(journey) for journey in journeys]


def get_public_journey_summary(db: Session, journey_id: str) -> dict:
    journey = db.get(Journey, journey_id)
    if journey is None or not journey.paid:
        raise NotFoundError("Journey not found")
    return create_public_journey_summary(journey)


def _count_stops(db: Session, journey_id: str) -> int:
    return db.query(func.count(Stop.id)).filter(Stop.journey_id == journey_id).scalar()


def serialize_created_stop(stop: Stop) -> dict:
    data = serialize_stop(stop)
    data["journeyId"] = stop.journey_id
    return data


def create_stop(
    db: Session,
    journey_id: str,
    title: Optional[str],
    note: Optional[str] = None,
    image_url: Optional[str] = None,
    icon_name: Optional[str] = None,
    external_url: Optional[str] = None,
) -> dict:
    title = _require_title(title)
    visual = resolve_visual(image_url, icon_name)
    external_url = format_external_url(external_url)

    _get_journey_or_404(db, journey_id)

    # Order is count + 1; the (journey_id, order) unique constraint catches a
    # concurrent insert that read the same count, in which case we recount.
    for attempt in range(1, STOP_ORDER_ATTEMPTS + 1):
        existing = _count_stops(db, journey_id)
        stop = Stop(
            journey_id=journey_id,
            title=title,
            note=note,
            visual=visual,
            external_url=external_url,
            order=existing + 1,
        )
        db.add(stop)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            if attempt == STOP_ORDER_ATTEMPTS:
                raise
            logger.warning(f"Stop order {existing + 1} taken on journey {journey_id}, retrying")
            continue
        break

    return serialize_created_stop(stop)


def update_stop(db: Session, stop_id: str, fields: dict) -> dict:
    """
    Apply a partial update. Only keys present in ``fields`` are changed;
    omitted image_url / icon_name fall back to the stored values before
    the exactly-one-of check. Order and journey never change here.
    """
    stop = db.get(Stop, stop_id)
    if stop is None:
        raise NotFoundError("Stop not found")

    if "title" in fields:
        stop.title = _require_title(fields["title"])

    if "image_url" in fields or "icon_name" in fields:
        stop.visual = resolve_visual(
            fields.get("image_url") if "image_url" in fields else stop.image_url,
            fields.get("icon_name") if "icon_name" in fields else stop.icon_name,
        )

    if "external_url" in fields:
        stop.external_url = format_external_url(fields["external_url"])

    if "note" in fields:
        stop.note = fields["note"]

    db.commit()
    logger.info(f"Updated stop {stop.id}")

    return serialize_created_stop(stop)
