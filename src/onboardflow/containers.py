"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from onboardflow.adapters.resend_email_client import HttpxResendClient
from onboardflow.adapters.stripe_payment_gateway import StripePaymentGateway
from onboardflow.adapters.supabase_photographer_repository import (
    SupabasePhotographerRepository,
)
from onboardflow.adapters.supabase_project_repository import (
    SupabaseProjectRepository,
)
from onboardflow.adapters.supabase_signature_repository import (
    SupabaseSignatureRepository,
)
from onboardflow.config import Settings
from onboardflow.services.booking import BookingService
from onboardflow.services.links import LinkService
from onboardflow.services.notifications import NotificationService
from onboardflow.services.payments import PaymentService
from onboardflow.services.photographers import PhotographerService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    photographer_service: PhotographerService
    link_service: LinkService
    booking_service: BookingService
    payment_service: PaymentService
    notification_service: NotificationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    photographer_repository = SupabasePhotographerRepository(supabase_client)
    project_repository = SupabaseProjectRepository(supabase_client)
    signature_repository = SupabaseSignatureRepository(supabase_client)
    photographer_service = PhotographerService(photographer_repository)
    link_service = LinkService(
        photographer_service=photographer_service,
        project_repository=project_repository,
        app_url=resolved_settings.app_url,
    )
    booking_service = BookingService(
        project_repository=project_repository,
        signature_repository=signature_repository,
        photographer_service=photographer_service,
    )
    payment_gateway = StripePaymentGateway(
        api_key=resolved_settings.stripe_secret_key,
        webhook_secret=resolved_settings.stripe_webhook_secret,
        currency=resolved_settings.stripe_currency,
    )
    payment_service = PaymentService(
        gateway=payment_gateway,
        booking_service=booking_service,
        app_url=resolved_settings.app_url,
    )
    email_client = HttpxResendClient.create(
        api_key=resolved_settings.resend_api_key,
        sender=resolved_settings.email_from,
        base_url=resolved_settings.resend_api_url,
    )
    notification_service = NotificationService(email_client)

    async def close_resources() -> None:
        await email_client.close()

    return AppContainer(
        settings=resolved_settings,
        photographer_service=photographer_service,
        link_service=link_service,
        booking_service=booking_service,
        payment_service=payment_service,
        notification_service=notification_service,
        close_resources=close_resources,
    )
