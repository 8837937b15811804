"""Domain records for photographers, projects and signatures."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from uuid import UUID


class BookingStatus(StrEnum):
    """Persisted project status, in booking order."""

    PENDING = "pending"
    SIGNED = "signed"
    PAID = "paid"
    # Declared by the schema but never written by any transition.
    COMPLETED = "completed"

    @property
    def rank(self) -> int:
        """Position of the status in the booking order."""
        return _STATUS_ORDER.index(self)


_STATUS_ORDER = (
    BookingStatus.PENDING,
    BookingStatus.SIGNED,
    BookingStatus.PAID,
    BookingStatus.COMPLETED,
)


@dataclass(frozen=True)
class PhotographerRecord:
    """Represents a photographer stored in the database."""

    id: UUID
    email: str


@dataclass(frozen=True)
class ProjectRecord:
    """Represents a booking project addressed by its magic link slug."""

    id: UUID
    photographer_id: UUID
    client_email: str
    project_name: str
    amount: int
    magic_link: str
    status: BookingStatus
    contract_signed_at: datetime | None = None
    paid_at: datetime | None = None


@dataclass(frozen=True)
class SignatureRecord:
    """A captured client signature."""

    id: UUID
    project_id: UUID
    signature_data: str
    created_at: datetime | None = None
