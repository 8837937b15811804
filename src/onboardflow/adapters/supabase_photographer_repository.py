"""Supabase-backed photographer repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from onboardflow.domain.models import PhotographerRecord
from onboardflow.services.photographers import PhotographerRepository


@dataclass
class SupabasePhotographerRepository(PhotographerRepository):
    """Supabase implementation for photographer persistence."""

    client: Client

    def get_by_email(self, email: str) -> PhotographerRecord | None:
        """Return the photographer for an email, if present."""
        response = (
            self.client.table("photographers")
            .select("id, email")
            .eq("email", email)
            .limit(1)
            .execute()
        )
        if response.data:
            return _to_record(response.data[0])
        return None

    def get_by_id(self, photographer_id: UUID) -> PhotographerRecord | None:
        """Return the photographer by id, if present."""
        response = (
            self.client.table("photographers")
            .select("id, email")
            .eq("id", str(photographer_id))
            .limit(1)
            .execute()
        )
        if response.data:
            return _to_record(response.data[0])
        return None

    def create_photographer(self, email: str) -> PhotographerRecord:
        """Create a new photographer row and return it."""
        response = self.client.table("photographers").insert({"email": email}).execute()
        if not response.data:
            raise RuntimeError("Failed to create photographer in Supabase")
        return _to_record(response.data[0])


def _to_record(row: dict[str, object]) -> PhotographerRecord:
    return PhotographerRecord(id=UUID(str(row["id"])), email=str(row["email"]))
