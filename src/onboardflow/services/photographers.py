"""Photographer lookup and lazy creation."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from onboardflow.domain.models import PhotographerRecord


class PhotographerRepository(Protocol):
    """Persistence interface for photographers."""

    def get_by_email(self, email: str) -> PhotographerRecord | None:
        """Return the photographer with this email, if present."""

    def get_by_id(self, photographer_id: UUID) -> PhotographerRecord | None:
        """Return the photographer by id, if present."""

    def create_photographer(self, email: str) -> PhotographerRecord:
        """Create and return a new photographer record."""


@dataclass
class PhotographerService:
    """Application service for photographer records."""

    repository: PhotographerRepository

    def ensure_photographer(self, email: str) -> PhotographerRecord:
        """Return the photographer for an email, creating it on first use."""
        existing = self.repository.get_by_email(email)
        if existing:
            return existing
        return self.repository.create_photographer(email)

    def get_email(self, photographer_id: UUID) -> str | None:
        """Return the photographer's email address, if the record exists."""
        photographer = self.repository.get_by_id(photographer_id)
        return photographer.email if photographer else None
