"""Supabase-backed project repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from onboardflow.domain.models import BookingStatus, ProjectRecord
from onboardflow.services.booking import ProjectRepository

_PROJECT_COLUMNS = (
    "id, photographer_id, client_email, project_name, amount, magic_link, "
    "status, contract_signed_at, paid_at"
)


@dataclass
class SupabaseProjectRepository(ProjectRepository):
    """Supabase implementation for booking projects."""

    client: Client

    def create_project(  # noqa: PLR0913
        self,
        photographer_id: UUID,
        client_email: str,
        project_name: str,
        amount: int,
        magic_link: str,
    ) -> ProjectRecord:
        """Create a pending project row and return it."""
        response = (
            self.client.table("projects")
            .insert(
                {
                    "photographer_id": str(photographer_id),
                    "client_email": client_email,
                    "project_name": project_name,
                    "amount": amount,
                    "magic_link": magic_link,
                    "status": BookingStatus.PENDING.value,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create project")
        return _to_record(response.data[0])

    def get_by_slug(self, slug: str) -> ProjectRecord | None:
        """Return the project for a magic link slug, if present."""
        response = (
            self.client.table("projects")
            .select(_PROJECT_COLUMNS)
            .eq("magic_link", slug)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def get_by_id(self, project_id: UUID) -> ProjectRecord | None:
        """Return a project by id, if present."""
        response = (
            self.client.table("projects")
            .select(_PROJECT_COLUMNS)
            .eq("id", str(project_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def apply_transition(
        self, project: ProjectRecord, expected_status: BookingStatus
    ) -> bool:
        """Write status and timestamps only if the row still has expected_status."""
        response = (
            self.client.table("projects")
            .update(
                {
                    "status": project.status.value,
                    "contract_signed_at": _isoformat(project.contract_signed_at),
                    "paid_at": _isoformat(project.paid_at),
                }
            )
            .eq("id", str(project.id))
            .eq("status", expected_status.value)
            .execute()
        )
        return bool(response.data)


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_timestamp(value: object) -> datetime | None:
    return datetime.fromisoformat(str(value)) if value else None


def _to_record(row: dict[str, object]) -> ProjectRecord:
    return ProjectRecord(
        id=UUID(str(row["id"])),
        photographer_id=UUID(str(row["photographer_id"])),
        client_email=str(row["client_email"]),
        project_name=str(row["project_name"]),
        amount=int(row["amount"]),  # type: ignore[call-overload]
        magic_link=str(row["magic_link"]),
        status=BookingStatus(row["status"]),
        contract_signed_at=_parse_timestamp(row.get("contract_signed_at")),
        paid_at=_parse_timestamp(row.get("paid_at")),
    )
