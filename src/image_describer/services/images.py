"""Upload, describe and persist pipeline for images."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol

from image_describer.domain.errors import NoImageToDescribeError
from image_describer.domain.models import DescriptionRecord, UploadedImage
from image_describer.services.descriptions import DescriptionService

logger = logging.getLogger(__name__)

ANONYMOUS_CLIENT = "anonymous"


class ObjectStore(Protocol):
    """Interface for binary object storage."""

    def put_object(
        self,
        key: str,
        body: bytes,
        content_type: str | None,
        metadata: dict[str, str],
    ) -> None:
        """Store bytes under the given key."""

    def public_url(self, key: str) -> str:
        """Return the public URL for a stored key."""


class ImageRepository(Protocol):
    """Persistence interface for uploaded image metadata."""

    def create_image(self, name: str, url: str) -> UploadedImage:
        """Create and return an uploaded image row."""


class DescriptionRepository(Protocol):
    """Persistence interface for description records."""

    def create_record(self, image_url: str, description: str) -> DescriptionRecord:
        """Create and return a description record."""

    def list_records(self) -> list[DescriptionRecord]:
        """Return every description record."""


@dataclass
class _TrackedUpload:
    url: str
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class UploadTracker:
    """Remembers the last uploaded URL per client key.

    Slots expire after ttl_seconds and the oldest slot is evicted once
    max_entries is reached.
    """

    ttl_seconds: int = 3600
    max_entries: int = 10_000
    clock: Callable[[], datetime] = field(default=_utcnow)
    _entries: dict[str, _TrackedUpload] = field(default_factory=dict)

    def remember(self, client_key: str, url: str) -> None:
        """Record the latest upload for a client."""
        now = self.clock()
        self._entries.pop(client_key, None)
        self._evict_expired(now)
        while len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            self._entries.pop(oldest)
        self._entries[client_key] = _TrackedUpload(
            url=url, expires_at=now + timedelta(seconds=self.ttl_seconds)
        )

    def last_url(self, client_key: str) -> str | None:
        """Return the latest upload for a client, if it hasn't expired."""
        entry = self._entries.get(client_key)
        if entry is None:
            return None
        if self.clock() >= entry.expires_at:
            self._entries.pop(client_key, None)
            return None
        return entry.url

    def __len__(self) -> int:
        return len(self._entries)

    def _evict_expired(self, now: datetime) -> None:
        # Insertion order equals expiry order since every slot shares one TTL.
        while self._entries:
            oldest_key = next(iter(self._entries))
            if now < self._entries[oldest_key].expires_at:
                return
            self._entries.pop(oldest_key)


@dataclass
class ImagePipelineService:
    """Coordinates upload, description and persistence of images."""

    object_store: ObjectStore
    image_repository: ImageRepository
    description_repository: DescriptionRepository
    description_service: DescriptionService
    tracker: UploadTracker = field(default_factory=UploadTracker)

    async def handle_upload(
        self,
        file_bytes: bytes,
        file_name: str,
        content_type: str | None = None,
        client_key: str = ANONYMOUS_CLIENT,
    ) -> UploadedImage:
        """Store the file off the event loop, remember its URL and persist it."""
        await asyncio.to_thread(
            self.object_store.put_object,
            key=file_name,
            body=file_bytes,
            content_type=content_type,
            metadata={"fieldName": "image"},
        )
        url = self.object_store.public_url(file_name)
        self.tracker.remember(client_key, url)
        logger.info("Image uploaded", extra={"image_url": url})
        return self.image_repository.create_image(name=file_name, url=url)

    async def generate_description(
        self,
        model: str | None = None,
        image_url: str | None = None,
        client_key: str = ANONYMOUS_CLIENT,
    ) -> str:
        """Describe an explicit image URL or the client's last upload."""
        resolved_url = (image_url or "").strip() or self.tracker.last_url(client_key)
        if not resolved_url:
            raise NoImageToDescribeError(client_key)
        logger.info(
            "Generating description",
            extra={"image_url": resolved_url, "requested_model": model},
        )
        return await self.description_service.describe(resolved_url, model=model)

    def save_record(self, image_url: str, description: str) -> DescriptionRecord:
        """Persist a description record; duplicates are stored as new rows."""
        record = self.description_repository.create_record(
            image_url=image_url, description=description
        )
        logger.info("Description saved", extra={"record_id": str(record.id)})
        return record

    def list_records(self) -> list[DescriptionRecord]:
        """Return all saved description records."""
        return self.description_repository.list_records()
