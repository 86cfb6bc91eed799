"""Pydantic request and response models for the HTTP API."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from image_describer.domain.models import DescriptionRecord


class GenerateDescriptionRequest(BaseModel):
    """Body for description generation."""

    model: str | None = None
    image_url: str | None = Field(default=None, alias="imageUrl")

    model_config = ConfigDict(populate_by_name=True)


class SaveRecordRequest(BaseModel):
    """Body for saving a description record."""

    description: str
    image_url: str = Field(alias="imageUrl")

    model_config = ConfigDict(populate_by_name=True)


class DescriptionRecordPayload(BaseModel):
    """Wire form of a saved description record."""

    id: UUID
    image_url: str = Field(serialization_alias="imageUrl")
    description: str
    created_at: datetime | None = Field(default=None, serialization_alias="createdAt")

    @classmethod
    def from_record(cls, record: DescriptionRecord) -> "DescriptionRecordPayload":
        """Build the payload from a domain record."""
        return cls(
            id=record.id,
            image_url=record.image_url,
            description=record.description,
            created_at=record.created_at,
        )


class ForgetPasswordRequest(BaseModel):
    """Body for requesting a reset OTP."""

    email: str


class ResetPasswordRequest(BaseModel):
    """Body for resetting a password with an OTP."""

    email: str
    otp: str
    new_password: str = Field(alias="newPassword")

    model_config = ConfigDict(populate_by_name=True)


class LoginRequest(BaseModel):
    """Body for login."""

    username: str
    password: str


class RegisterRequest(BaseModel):
    """Body for registration."""

    username: str
    password: str
    email: str
