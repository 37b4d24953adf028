import logging

import stripe
from fastapi import Request

from journey_share.config import Settings

logger = logging.getLogger(__name__)


class StripeGateway:
    """Thin wrapper over the Stripe calls the service makes."""

    def __init__(self, settings: Settings):
        self.api_key = settings.stripe_secret_key
        self.webhook_secret = settings.stripe_webhook_secret
        self.client_url = settings.client_url
        self.price = settings.journey_price
        self.currency = settings.journey_currency

    def create_checkout_session(self, journey_id: str, journey_title: str):
        return stripe.checkout.Session.create(
            api_key=self.api_key,
            payment_method_types=["card"],
            line_items=[
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {
                            "name": f"Journey: {journey_title}",
                            "description": "Share your thoughtful journey with someone special",
                        },
                        "unit_amount": self.price,
                    },
                    "quantity": 1,
                }
            ],
            mode="payment",
            allow_promotion_codes=True,
            success_url=f"{self.client_url}/journeys/{journey_id}/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=f"{self.client_url}/journeys/{journey_id}",
            metadata={"journeyId": journey_id},
        )

    def retrieve_checkout_session(self, session_id: str):
        return stripe.checkout.Session.retrieve(session_id, api_key=self.api_key)

    def construct_event(self, payload: bytes, signature: str):
        return stripe.Webhook.construct_event(payload, signature, self.webhook_secret)


def get_gateway(request: Request) -> StripeGateway:
    return request.app.state.gateway
