"""Checkout initiation and payment webhook handling."""

import logging
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from pydantic import ValidationError

from onboardflow.domain.booking import TransitionOutcome
from onboardflow.domain.models import BookingStatus
from onboardflow.domain.payments import (
    CHECKOUT_SESSION_COMPLETED,
    CheckoutSession,
    PaymentEvent,
)
from onboardflow.services.booking import (
    BookingService,
    ProjectNotFoundError,
    TransitionRejectedError,
    TransitionResult,
)
from onboardflow.services.links import client_portal_url

logger = logging.getLogger(__name__)


class InvalidSignatureError(ValueError):
    """Raised when a webhook payload fails signature verification."""


class PaymentGateway(Protocol):
    """Interface for the hosted checkout provider."""

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
        """Create a hosted checkout session and return it."""

    def verify_event(self, payload: bytes, signature: str) -> dict[str, object]:
        """Verify a webhook payload and return the decoded event.

        Raises InvalidSignatureError when verification fails.
        """


@dataclass
class PaymentService:
    """Start checkouts and apply confirmed payments."""

    gateway: PaymentGateway
    booking_service: BookingService
    app_url: str

    def start_checkout(self, slug: str) -> CheckoutSession:
        """Create a checkout session for a signed project."""
        project = self.booking_service.get_by_slug(slug)
        if project.status is not BookingStatus.SIGNED:
            raise TransitionRejectedError("pay for", project.status)
        base_url = self.app_url.rstrip("/")
        return self.gateway.create_checkout_session(
            project_id=project.id,
            amount=project.amount,
            project_name=project.project_name,
            customer_email=project.client_email,
            success_url=f"{base_url}/success?session_id={{CHECKOUT_SESSION_ID}}",
            cancel_url=client_portal_url(self.app_url, slug),
        )

    def handle_webhook(
        self, payload: bytes, signature: str | None
    ) -> TransitionResult | None:
        """Verify and apply a webhook event.

        Returns the transition result for a completed checkout that names a
        known project, and None for every other verified event.
        """
        if not signature:
            raise InvalidSignatureError("Missing signature header")
        raw_event = self.gateway.verify_event(payload, signature)
        try:
            event = PaymentEvent.model_validate(raw_event)
        except ValidationError:
            logger.warning("Ignoring malformed webhook event", exc_info=True)
            return None

        if event.type != CHECKOUT_SESSION_COMPLETED:
            logger.info("Unhandled event type: %s", event.type)
            return None

        try:
            session = event.checkout_session()
        except ValidationError:
            logger.warning(
                "Ignoring malformed checkout session",
                extra={"event_id": event.id},
                exc_info=True,
            )
            return None
        raw_project_id = session.project_id
        if not raw_project_id:
            logger.warning(
                "Checkout completed without project id", extra={"event_id": event.id}
            )
            return None
        try:
            project_id = UUID(raw_project_id)
        except ValueError:
            logger.warning(
                "Checkout completed with malformed project id",
                extra={"event_id": event.id},
            )
            return None

        try:
            result = self.booking_service.confirm_payment(project_id)
        except ProjectNotFoundError:
            logger.warning(
                "Checkout completed for unknown project",
                extra={"project_id": raw_project_id},
            )
            return None
        if result.outcome is TransitionOutcome.REJECTED:
            logger.warning(
                "Payment received for project that is not signed",
                extra={"project_id": raw_project_id, "status": result.project.status},
            )
        elif result.outcome is TransitionOutcome.NO_OP:
            logger.info(
                "Duplicate payment confirmation ignored",
                extra={"project_id": raw_project_id},
            )
        return result
