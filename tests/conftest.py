"""Shared test fixtures."""

import json
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest

from onboardflow.config import Settings
from onboardflow.containers import AppContainer
from onboardflow.domain.models import (
    BookingStatus,
    PhotographerRecord,
    ProjectRecord,
    SignatureRecord,
)
from onboardflow.domain.payments import CheckoutSession
from onboardflow.services.booking import (
    BookingService,
    ProjectRepository,
    SignatureRepository,
)
from onboardflow.services.links import LinkService
from onboardflow.services.notifications import EmailSender, NotificationService
from onboardflow.services.payments import (
    InvalidSignatureError,
    PaymentGateway,
    PaymentService,
)
from onboardflow.services.photographers import (
    PhotographerRepository,
    PhotographerService,
)

FIXED_NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)
VALID_SIGNATURE = "valid-signature"


@dataclass
class InMemoryPhotographerRepository(PhotographerRepository):
    """In-memory photographer repository for tests."""

    photographers: dict[str, PhotographerRecord] = field(default_factory=dict)
    fail_on_get_by_id: bool = False

    def get_by_email(self, email: str) -> PhotographerRecord | None:
        return self.photographers.get(email)

    def get_by_id(self, photographer_id: UUID) -> PhotographerRecord | None:
        if self.fail_on_get_by_id:
            raise RuntimeError("Photographer lookup failed")
        for photographer in self.photographers.values():
            if photographer.id == photographer_id:
                return photographer
        return None

    def create_photographer(self, email: str) -> PhotographerRecord:
        photographer = PhotographerRecord(id=uuid4(), email=email)
        self.photographers[email] = photographer
        return photographer


@dataclass
class InMemoryProjectRepository(ProjectRepository):
    """In-memory project repository for tests."""

    projects: dict[UUID, ProjectRecord] = field(default_factory=dict)
    fail_on_create: bool = False

    def create_project(  # noqa: PLR0913
        self,
        photographer_id: UUID,
        client_email: str,
        project_name: str,
        amount: int,
        magic_link: str,
    ) -> ProjectRecord:
        if self.fail_on_create:
            raise RuntimeError("Failed to create project")
        project = ProjectRecord(
            id=uuid4(),
            photographer_id=photographer_id,
            client_email=client_email,
            project_name=project_name,
            amount=amount,
            magic_link=magic_link,
            status=BookingStatus.PENDING,
        )
        self.projects[project.id] = project
        return project

    def get_by_slug(self, slug: str) -> ProjectRecord | None:
        for project in self.projects.values():
            if project.magic_link == slug:
                return project
        return None

    def get_by_id(self, project_id: UUID) -> ProjectRecord | None:
        return self.projects.get(project_id)

    def apply_transition(
        self, project: ProjectRecord, expected_status: BookingStatus
    ) -> bool:
        stored = self.projects.get(project.id)
        if stored is None or stored.status is not expected_status:
            return False
        self.projects[project.id] = project
        return True


@dataclass
class InMemorySignatureRepository(SignatureRepository):
    """In-memory signature repository for tests."""

    signatures: list[SignatureRecord] = field(default_factory=list)

    def create_signature(
        self, project_id: UUID, signature_data: str
    ) -> SignatureRecord:
        signature = SignatureRecord(
            id=uuid4(),
            project_id=project_id,
            signature_data=signature_data,
            created_at=FIXED_NOW,
        )
        self.signatures.append(signature)
        return signature


@dataclass
class FakeEmailSender(EmailSender):
    """Fake email sender that records messages."""

    sent: list[tuple[str, str, str]] = field(default_factory=list)
    fail_for: set[str] = field(default_factory=set)

    async def send_email(self, to: str, subject: str, html: str) -> None:
        if to in self.fail_for:
            raise RuntimeError(f"Email provider rejected {to}")
        self.sent.append((to, subject, html))


@dataclass
class FakePaymentGateway(PaymentGateway):
    """Fake gateway that accepts a single known signature."""

    sessions: list[dict[str, object]] = field(default_factory=list)

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
        self.sessions.append(
            {
                "project_id": project_id,
                "amount": amount,
                "project_name": project_name,
                "customer_email": customer_email,
                "success_url": success_url,
                "cancel_url": cancel_url,
            }
        )
        session_id = f"cs_test_{len(self.sessions)}"
        return CheckoutSession(
            id=session_id, url=f"https://checkout.stripe.test/{session_id}"
        )

    def verify_event(self, payload: bytes, signature: str) -> dict[str, object]:
        if signature != VALID_SIGNATURE:
            raise InvalidSignatureError("No signatures found matching the payload")
        return json.loads(payload)


def checkout_completed_event(project_id: UUID | str | None) -> dict[str, object]:
    """Build a checkout.session.completed webhook body."""
    metadata = {"projectId": str(project_id)} if project_id is not None else {}
    return {
        "id": "evt_test_1",
        "type": "checkout.session.completed",
        "data": {
            "object": {
                "id": "cs_test_1",
                "object": "checkout.session",
                "payment_status": "paid",
                "metadata": metadata,
            }
        },
    }


def make_project(
    repository: InMemoryProjectRepository,
    photographer: PhotographerRecord,
    status: BookingStatus = BookingStatus.PENDING,
    slug: str = "abcDEF123_",
) -> ProjectRecord:
    """Insert a project in the given status with consistent timestamps."""
    project = repository.create_project(
        photographer_id=photographer.id,
        client_email="client@example.com",
        project_name="Johnson Family Portrait Session",
        amount=25000,
        magic_link=slug,
    )
    signed_at = FIXED_NOW if status.rank >= BookingStatus.SIGNED.rank else None
    paid_at = FIXED_NOW if status.rank >= BookingStatus.PAID.rank else None
    project = replace(
        project, status=status, contract_signed_at=signed_at, paid_at=paid_at
    )
    repository.projects[project.id] = project
    return project


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key=(
            "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9."
            "eyJyb2xlIjoic2VydmljZV9yb2xlIn0."
            "c2lnbmF0dXJl"
        ),
        stripe_secret_key="sk_test_123",
        stripe_webhook_secret="whsec_test_secret",
        resend_api_key="re_test_123",
        app_url="https://app.onboardflow.test/",
    )


@pytest.fixture
def photographer_repository() -> InMemoryPhotographerRepository:
    return InMemoryPhotographerRepository()


@pytest.fixture
def project_repository() -> InMemoryProjectRepository:
    return InMemoryProjectRepository()


@pytest.fixture
def signature_repository() -> InMemorySignatureRepository:
    return InMemorySignatureRepository()


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def payment_gateway() -> FakePaymentGateway:
    return FakePaymentGateway()


@pytest.fixture
def photographer(
    photographer_repository: InMemoryPhotographerRepository,
) -> PhotographerRecord:
    return photographer_repository.create_photographer("photog@example.com")


@pytest.fixture
def photographer_service(
    photographer_repository: InMemoryPhotographerRepository,
) -> PhotographerService:
    return PhotographerService(photographer_repository)


@pytest.fixture
def booking_service(
    project_repository: InMemoryProjectRepository,
    signature_repository: InMemorySignatureRepository,
    photographer_service: PhotographerService,
) -> BookingService:
    return BookingService(
        project_repository=project_repository,
        signature_repository=signature_repository,
        photographer_service=photographer_service,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def payment_service(
    payment_gateway: FakePaymentGateway,
    booking_service: BookingService,
    settings: Settings,
) -> PaymentService:
    return PaymentService(
        gateway=payment_gateway,
        booking_service=booking_service,
        app_url=settings.app_url,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    photographer_service: PhotographerService,
    project_repository: InMemoryProjectRepository,
    booking_service: BookingService,
    payment_service: PaymentService,
    email_sender: FakeEmailSender,
) -> AppContainer:
    link_service = LinkService(
        photographer_service=photographer_service,
        project_repository=project_repository,
        app_url=settings.app_url,
        slug_factory=lambda: "magicSlug1",
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        photographer_service=photographer_service,
        link_service=link_service,
        booking_service=booking_service,
        payment_service=payment_service,
        notification_service=NotificationService(email_sender),
        close_resources=close_resources,
    )
