from fastapi import APIRouter, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool
from sqlalchemy.orm import Session

from journey_share import payment_service
from journey_share.database import get_db
from journey_share.stripe_service import StripeGateway, get_gateway

router = APIRouter(prefix="/api/webhooks", tags=["webhooks"])


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    stripe_signature: str = Header(None),
    db: Session = Depends(get_db),
    gateway: StripeGateway = Depends(get_gateway),
):
    # Signature is computed over the raw bytes, so the body is never parsed here
    payload = await request.body()
    # Database work is blocking, keep it off the event loop
    return await run_in_threadpool(payment_service.handle_webhook, db, gateway, payload, stripe_signature)
