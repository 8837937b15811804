"""Models for payment processor events and checkout sessions."""

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, Field

CHECKOUT_SESSION_COMPLETED = "checkout.session.completed"


class CheckoutSessionObject(BaseModel):
    """Subset of a checkout session carried in webhook events."""

    id: str | None = None
    metadata: dict[str, str] | None = None
    payment_status: str | None = None

    @property
    def project_id(self) -> str | None:
        """Project identifier stored on the session when it was created."""
        if not self.metadata:
            return None
        return self.metadata.get("projectId") or None


class PaymentEventData(BaseModel):
    """Envelope for the event's subject object."""

    object: dict[str, Any] = Field(default_factory=dict)


class PaymentEvent(BaseModel):
    """A verified payment processor event."""

    id: str | None = None
    type: str
    data: PaymentEventData = Field(default_factory=PaymentEventData)

    def checkout_session(self) -> CheckoutSessionObject:
        """Parse the event subject as a checkout session."""
        return CheckoutSessionObject.model_validate(self.data.object)


@dataclass(frozen=True)
class CheckoutSession:
    """Hosted checkout session returned by the payment processor."""

    id: str
    url: str
