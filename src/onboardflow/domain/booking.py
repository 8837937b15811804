"""Booking status transitions and portal step derivation."""

from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum

from onboardflow.domain.models import BookingStatus, ProjectRecord

STEP_REVIEW = 1
STEP_SIGN = 2
STEP_PAY = 3
STEP_DONE = 4


class TransitionOutcome(StrEnum):
    """Result tag for a requested status transition."""

    APPLIED = "applied"
    NO_OP = "no_op"
    REJECTED = "rejected"


@dataclass(frozen=True)
class TransitionPlan:
    """Decision for a transition against the current persisted project.

    ``updated`` is the project as it should be persisted when the outcome is
    ``APPLIED``; otherwise it is the unchanged input.
    """

    outcome: TransitionOutcome
    source: BookingStatus
    updated: ProjectRecord


def plan_signature(project: ProjectRecord, now: datetime) -> TransitionPlan:
    """Plan the pending -> signed transition."""
    if project.status is BookingStatus.PENDING:
        return TransitionPlan(
            outcome=TransitionOutcome.APPLIED,
            source=project.status,
            updated=replace(
                project, status=BookingStatus.SIGNED, contract_signed_at=now
            ),
        )
    if project.status is BookingStatus.SIGNED:
        return TransitionPlan(TransitionOutcome.NO_OP, project.status, project)
    return TransitionPlan(TransitionOutcome.REJECTED, project.status, project)


def plan_payment(project: ProjectRecord, now: datetime) -> TransitionPlan:
    """Plan the signed -> paid transition."""
    if project.status is BookingStatus.SIGNED:
        return TransitionPlan(
            outcome=TransitionOutcome.APPLIED,
            source=project.status,
            updated=replace(project, status=BookingStatus.PAID, paid_at=now),
        )
    if project.status.rank >= BookingStatus.PAID.rank:
        return TransitionPlan(TransitionOutcome.NO_OP, project.status, project)
    return TransitionPlan(TransitionOutcome.REJECTED, project.status, project)


def portal_step(project: ProjectRecord) -> int:
    """Return the portal step to show for a freshly loaded project.

    The signing step is only reachable from the review step in the page
    itself, so a reload never lands on it.
    """
    if project.paid_at:
        return STEP_DONE
    if project.contract_signed_at:
        return STEP_PAY
    return STEP_REVIEW
