"""Supabase-backed description record repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from image_describer.domain.models import DescriptionRecord
from image_describer.services.images import DescriptionRepository


@dataclass
class SupabaseDescriptionRepository(DescriptionRepository):
    """Supabase implementation for description records."""

    client: Client

    def create_record(self, image_url: str, description: str) -> DescriptionRecord:
        """Insert a description record and return it."""
        response = (
            self.client.table("image_descriptions")
            .insert({"image_url": image_url, "description": description})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create description record")
        return _parse_record(response.data[0])

    def list_records(self) -> list[DescriptionRecord]:
        """Return all description records in insertion order."""
        response = (
            self.client.table("image_descriptions")
            .select("id, image_url, description, created_at")
            .order("created_at", desc=False)
            .execute()
        )
        return [_parse_record(row) for row in response.data or []]


def _parse_record(row: dict[str, object]) -> DescriptionRecord:
    created_at_raw = row.get("created_at")
    created_at = (
        datetime.fromisoformat(created_at_raw)
        if isinstance(created_at_raw, str) and created_at_raw
        else None
    )
    return DescriptionRecord(
        id=UUID(str(row["id"])),
        image_url=str(row.get("image_url") or ""),
        description=str(row.get("description") or ""),
        created_at=created_at,
    )
