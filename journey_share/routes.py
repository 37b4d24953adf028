from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.orm import Session

from journey_share import journey_service, payment_service
from journey_share.database import get_db
from journey_share.stripe_service import StripeGateway, get_gateway

router = APIRouter(prefix="/api")


class JourneyRequest(BaseModel):
    title: Optional[str] = None


class StopRequest(BaseModel):
    title: Optional[str] = None
    note: Optional[str] = None
    image_url: Optional[str] = None
    icon_name: Optional[str] = None
    external_url: Optional[str] = None


@router.post("/journeys", status_code=201)
def create_journey(request: Optional[JourneyRequest] = None, db: Session = Depends(get_db)):
    title = request.title if request else None
    return journey_service.create_journey(db, title)


# Registered before /journeys/{journey_id} so "public" is not taken as an id
@router.get("/journeys/public")
def list_public_journeys(db: Session = Depends(get_db)):
    return journey_service.list_public_journeys(db)


@router.get("/journeys/public/{journey_id}")
def get_public_journey(journey_id: str, db: Session = Depends(get_db)):
    return journey_service.get_public_journey_summary(db, journey_id)


@router.get("/journeys/{journey_id}")
def get_journey(journey_id: str, db: Session = Depends(get_db)):
    return journey_service.get_journey_by_id(db, journey_id)


@router.post("/journeys/{journey_id}/stops", status_code=201)
def create_stop(journey_id: str, request: Optional[StopRequest] = None, db: Session = Depends(get_db)):
    request = request or StopRequest()
    return journey_service.create_stop(
        db,
        journey_id,
        title=request.title,
        note=request.note,
        image_url=request.image_url,
        icon_name=request.icon_name,
        external_url=request.external_url,
    )


@router.patch("/stops/{stop_id}")
def update_stop(stop_id: str, request: Optional[StopRequest] = None, db: Session = Depends(get_db)):
    fields = request.model_dump(exclude_unset=True) if request else {}
    return journey_service.update_stop(db, stop_id, fields)


@router.post("/journeys/{journey_id}/create-checkout-session")
def create_checkout_session(
    journey_id: str,
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_gateway),
):
    return payment_service.create_checkout_session(db, gateway, journey_id)


@router.get("/checkout-session/{session_id}")
def checkout_session_status(
    session_id: str,
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_gateway),
):
    return payment_service.check_checkout_session_status(db, gateway, session_id)


@router.get("/reveal/{shareable_token}")
def reveal_journey(shareable_token: str, db: Session = Depends(get_db)):
    return journey_service.reveal_journey_by_token(db, shareable_token)
