"""
Seed the database with a paid demo journey reachable at a fixed token.

Run with: journey-share-seed
"""

import logging
import os

from sqlalchemy import or_
from sqlalchemy.orm import Session

from journey_share.config import Settings
from journey_share.database import Base, make_engine, make_session_factory
from journey_share.main import configure_logging
from journey_share.models import Journey, Stop
from journey_share.visuals import ImageVisual

logger = logging.getLogger(__name__)

DEMO_JOURNEY_ID = "demo-journey-id"
DEMO_JOURNEY_TOKEN = "demo-journey-paris"

DEMO_STOPS = [
    {
        "title": "Eiffel Tower at Sunset",
        "note": (
            "We'll climb to the second floor just as the golden hour begins. "
            "Paris will spread out below us like a dream."
        ),
        "image_url": "https://images.unsplash.com/photo-1549144511-f099e773c147?w=800&h=600&fit=crop",
        "external_url": "https://www.toureiffel.paris/en/rates-opening-times",
    },
    {
        "title": "Café de Flore Morning",
        "note": "Café au lait and fresh croissants at the legendary café on our first morning.",
        "image_url": "https://images.unsplash.com/photo-1554118811-1e0d58224f24?w=800&h=600&fit=crop",
        "external_url": "https://cafedeflore.fr/en/",
    },
    {
        "title": "Seine River Cruise",
        "note": "Floating down the Seine at twilight with Notre-Dame glowing in the distance.",
        "image_url": "https://images.unsplash.com/photo-1571003123894-1f0594d2b5d9?w=800&h=600&fit=crop",
        "external_url": "https://www.bateauxparisiens.com/",
    },
]


def seed_demo_journey(db: Session) -> Journey:
    existing = (
        db.query(Journey)
        .filter(or_(Journey.id == DEMO_JOURNEY_ID, Journey.shareable_token == DEMO_JOURNEY_TOKEN))
        .first()
    )
    if existing is not None:
        logger.info(f"Removing existing demo journey: {existing.title}")
        db.delete(existing)
        db.commit()

    journey = Journey(
        id=DEMO_JOURNEY_ID,
        title="A Romantic Trip to Paris",
        paid=True,
        shareable_token=DEMO_JOURNEY_TOKEN,
    )
    for order, data in enumerate(DEMO_STOPS, start=1):
        journey.stops.append(
            Stop(
                title=data["title"],
                note=data["note"],
                visual=ImageVisual(url=data["image_url"]),
                external_url=data["external_url"],
                order=order,
            )
        )

    db.add(journey)
    db.commit()
    return journey


def main():
    # Only the database is needed here, so the Stripe keys are not required
    configure_logging(os.getenv("LOG_LEVEL", Settings.log_level).upper())

    engine = make_engine(os.getenv("DATABASE_URL", Settings.database_url))
    Base.metadata.create_all(bind=engine)
    db = make_session_factory(engine)()

    try:
        journey = seed_demo_journey(db)
        logger.info(f"Demo journey created: {journey.title}")
        logger.info(f"Shareable token: {journey.shareable_token}")
        for stop in journey.stops:
            logger.info(f"  {stop.order}. {stop.title}")
    except Exception:
        logger.exception("Seeding failed")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
