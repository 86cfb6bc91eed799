"""Supabase-backed uploaded image repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from image_describer.domain.models import UploadedImage
from image_describer.services.images import ImageRepository


@dataclass
class SupabaseImageRepository(ImageRepository):
    """Supabase implementation for uploaded image metadata."""

    client: Client

    def create_image(self, name: str, url: str) -> UploadedImage:
        """Create an image metadata row and return it."""
        response = (
            self.client.table("images").insert({"name": name, "url": url}).execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create image metadata")
        row = response.data[0]
        return UploadedImage(
            id=UUID(row["id"]),
            name=row["name"],
            url=row["url"],
            created_at=_parse_timestamp(row.get("created_at")),
        )


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None
