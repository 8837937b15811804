"""Booking state machine service."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from onboardflow.domain.booking import (
    TransitionOutcome,
    TransitionPlan,
    plan_payment,
    plan_signature,
    portal_step,
)
from onboardflow.domain.models import BookingStatus, ProjectRecord, SignatureRecord
from onboardflow.services.notifications import (
    Notification,
    booking_confirmed,
    contract_signed,
    payment_received,
)
from onboardflow.services.photographers import PhotographerService

logger = logging.getLogger(__name__)


class ProjectNotFoundError(LookupError):
    """Raised when a slug or project id does not resolve to a project."""


class TransitionRejectedError(RuntimeError):
    """Raised when a project is not in a state that allows the action."""

    def __init__(self, action: str, status: BookingStatus) -> None:
        super().__init__(f"Cannot {action} a project with status {status.value}")
        self.action = action
        self.status = status


class ProjectRepository(Protocol):
    """Persistence interface for projects."""

    def create_project(  # noqa: PLR0913
        self,
        photographer_id: UUID,
        client_email: str,
        project_name: str,
        amount: int,
        magic_link: str,
    ) -> ProjectRecord:
        """Create a pending project and return it."""

    def get_by_slug(self, slug: str) -> ProjectRecord | None:
        """Return the project for a magic link slug, if present."""

    def get_by_id(self, project_id: UUID) -> ProjectRecord | None:
        """Return a project by id, if present."""

    def apply_transition(
        self, project: ProjectRecord, expected_status: BookingStatus
    ) -> bool:
        """Persist status and timestamps if the stored status still matches."""


class SignatureRepository(Protocol):
    """Persistence interface for captured signatures."""

    def create_signature(
        self, project_id: UUID, signature_data: str
    ) -> SignatureRecord:
        """Store a signature for a project and return it."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True)
class PortalView:
    """A project together with the portal step to display."""

    project: ProjectRecord
    step: int


@dataclass(frozen=True)
class TransitionResult:
    """Outcome of a transition plus the emails to send once committed."""

    outcome: TransitionOutcome
    project: ProjectRecord
    notifications: list[Notification] = field(default_factory=list)


@dataclass
class BookingService:
    """Drive projects through pending -> signed -> paid."""

    project_repository: ProjectRepository
    signature_repository: SignatureRepository
    photographer_service: PhotographerService
    clock: Callable[[], datetime] = _utcnow

    def get_by_slug(self, slug: str) -> ProjectRecord:
        """Return the project addressed by a magic link slug."""
        project = self.project_repository.get_by_slug(slug)
        if project is None:
            raise ProjectNotFoundError(slug)
        return project

    def get_by_id(self, project_id: UUID) -> ProjectRecord:
        """Return a project by id."""
        project = self.project_repository.get_by_id(project_id)
        if project is None:
            raise ProjectNotFoundError(str(project_id))
        return project

    def get_portal(self, slug: str) -> PortalView:
        """Load a project and derive the step the portal should show."""
        project = self.get_by_slug(slug)
        return PortalView(project=project, step=portal_step(project))

    def submit_signature(self, slug: str, signature_data: str) -> TransitionResult:
        """Record a client signature and move the project to signed."""
        project = self.get_by_slug(slug)
        plan = plan_signature(project, self.clock())
        if plan.outcome is not TransitionOutcome.APPLIED:
            logger.info(
                "Signature ignored",
                extra={"project_id": str(project.id), "outcome": plan.outcome.value},
            )
            return TransitionResult(outcome=plan.outcome, project=project)

        self.signature_repository.create_signature(project.id, signature_data)
        result = self._commit(plan)
        if result.outcome is TransitionOutcome.APPLIED:
            email = self._photographer_email(project)
            if email:
                result.notifications.append(contract_signed(email, result.project))
        return result

    def confirm_payment(self, project_id: UUID) -> TransitionResult:
        """Mark a project paid after the payment processor confirms it."""
        project = self.get_by_id(project_id)
        plan = plan_payment(project, self.clock())
        if plan.outcome is not TransitionOutcome.APPLIED:
            return TransitionResult(outcome=plan.outcome, project=project)

        result = self._commit(plan)
        if result.outcome is TransitionOutcome.APPLIED:
            email = self._photographer_email(project)
            if email:
                result.notifications.append(payment_received(email, result.project))
            result.notifications.append(booking_confirmed(result.project))
        return result

    def signed_notification(self, project_id: UUID) -> Notification:
        """Build the contract signed email for a project's photographer."""
        project = self.get_by_id(project_id)
        email = self.photographer_service.get_email(project.photographer_id)
        if email is None:
            raise ProjectNotFoundError(str(project_id))
        return contract_signed(email, project)

    def _photographer_email(self, project: ProjectRecord) -> str | None:
        # Runs after the commit, so a failed lookup only costs the email.
        try:
            return self.photographer_service.get_email(project.photographer_id)
        except Exception:
            logger.exception(
                "Failed to load photographer for notification",
                extra={"project_id": str(project.id)},
            )
            return None

    def _commit(self, plan: TransitionPlan) -> TransitionResult:
        applied = self.project_repository.apply_transition(
            plan.updated, expected_status=plan.source
        )
        if not applied:
            # Another request moved the project first.
            logger.warning(
                "Transition lost a concurrent update",
                extra={"project_id": str(plan.updated.id)},
            )
            return TransitionResult(
                outcome=TransitionOutcome.NO_OP,
                project=self.get_by_id(plan.updated.id),
            )
        return TransitionResult(
            outcome=TransitionOutcome.APPLIED, project=plan.updated
        )
