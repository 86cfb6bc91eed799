"""Domain models for the image describer."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class UploadedImage:
    """An image stored in the object store."""

    id: UUID
    name: str
    url: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class DescriptionRecord:
    """A saved description for an image URL."""

    id: UUID
    image_url: str
    description: str
    created_at: datetime | None = None


@dataclass(frozen=True)
class UserRecord:
    """Represents a user account stored in the database."""

    id: UUID
    username: str
    email: str
    password_hash: str
    otp: str | None = None
    otp_expires_at: datetime | None = None
