"""Stripe payment gateway adapter."""

import json
from dataclasses import dataclass
from uuid import UUID

import stripe

from onboardflow.domain.payments import CheckoutSession
from onboardflow.services.payments import InvalidSignatureError, PaymentGateway


@dataclass
class StripePaymentGateway(PaymentGateway):
    """Hosted checkout and webhook verification backed by Stripe."""

    api_key: str
    webhook_secret: str
    currency: str = "usd"

    def create_checkout_session(  # noqa: PLR0913
        self,
        *,
        project_id: UUID,
        amount: int,
        project_name: str,
        customer_email: str | None,
        success_url: str,
        cancel_url: str,
    ) -> CheckoutSession:
        """Create a one-off Checkout session for the project deposit."""
        params: dict[str, object] = {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self.currency,
                        "product_data": {"name": project_name},
                        "unit_amount": amount,
                    },
                    "quantity": 1,
                }
            ],
            "metadata": {"projectId": str(project_id)},
            "success_url": success_url,
            "cancel_url": cancel_url,
        }
        if customer_email:
            params["customer_email"] = customer_email
        session = stripe.checkout.Session.create(api_key=self.api_key, **params)
        if not session.url:
            raise RuntimeError("Stripe returned a checkout session without a URL")
        return CheckoutSession(id=session.id, url=session.url)

    def verify_event(self, payload: bytes, signature: str) -> dict[str, object]:
        """Verify the Stripe-Signature header and decode the event body."""
        body = payload.decode("utf-8", errors="replace")
        try:
            stripe.WebhookSignature.verify_header(body, signature, self.webhook_secret)
        except stripe.SignatureVerificationError as exc:
            raise InvalidSignatureError(str(exc)) from exc
        try:
            event = json.loads(body)
        except json.JSONDecodeError as exc:
            raise InvalidSignatureError("Webhook payload is not valid JSON") from exc
        if not isinstance(event, dict):
            raise InvalidSignatureError("Webhook payload is not an object")
        return event
