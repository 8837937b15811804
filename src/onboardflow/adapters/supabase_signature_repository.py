"""Supabase-backed signature repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from onboardflow.domain.models import SignatureRecord
from onboardflow.services.booking import SignatureRepository


@dataclass
class SupabaseSignatureRepository(SignatureRepository):
    """Supabase implementation for signature persistence."""

    client: Client

    def create_signature(
        self, project_id: UUID, signature_data: str
    ) -> SignatureRecord:
        """Insert a signature row and return it."""
        response = (
            self.client.table("signatures")
            .insert({"project_id": str(project_id), "signature_data": signature_data})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to save signature")
        row = response.data[0]
        created_at = row.get("created_at")
        return SignatureRecord(
            id=UUID(row["id"]),
            project_id=UUID(row["project_id"]),
            signature_data=row["signature_data"],
            created_at=datetime.fromisoformat(created_at) if created_at else None,
        )
