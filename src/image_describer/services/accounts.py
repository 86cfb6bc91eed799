"""Account registration, login and password reset logic."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from image_describer.domain.errors import (
    InvalidCredentialsError,
    InvalidOtpError,
    UsernameTakenError,
    UserNotFoundError,
)
from image_describer.domain.models import UserRecord
from image_describer.services.otp import generate_otp, is_otp_valid, otp_expiry

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Password Reset OTP"


class UserRepository(Protocol):
    """Persistence interface for user accounts."""

    def get_by_username(self, username: str) -> UserRecord | None:
        """Return the user with the given username, if present."""

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user with the given email, if present."""

    def create_user(self, username: str, email: str, password_hash: str) -> UserRecord:
        """Create and return a new user record."""

    def set_otp(self, user_id: UUID, otp: str, expires_at: datetime) -> None:
        """Store a pending reset OTP for the user."""

    def update_password(self, user_id: UUID, password_hash: str) -> None:
        """Replace the password hash and clear any pending OTP."""


class PasswordHasher(Protocol):
    """Interface for salted password hashing."""

    def hash(self, password: str) -> str:
        """Return a salted hash for the password."""

    def verify(self, password_hash: str, password: str) -> bool:
        """Return true when the password matches the hash."""


class Mailer(Protocol):
    """Interface for outgoing email."""

    async def send(self, to: str, subject: str, body: str) -> None:
        """Send a plain-text email."""


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class AccountService:
    """Application service for account lifecycle actions."""

    repository: UserRepository
    hasher: PasswordHasher
    mailer: Mailer
    clock: Callable[[], datetime] = field(default=_utcnow)

    def register(self, username: str, password: str, email: str) -> UserRecord:
        """Create a user unless the username is already taken."""
        if self.repository.get_by_username(username):
            raise UsernameTakenError(username)
        password_hash = self.hasher.hash(password)
        user = self.repository.create_user(
            username=username, email=email, password_hash=password_hash
        )
        logger.info("User registered", extra={"user_id": str(user.id)})
        return user

    def login(self, username: str, password: str) -> UserRecord:
        """Return the user when the credentials match."""
        user = self.repository.get_by_username(username)
        if user is None or not self.hasher.verify(user.password_hash, password):
            logger.info("Login rejected", extra={"username": username})
            raise InvalidCredentialsError(username)
        logger.info("Login successful", extra={"user_id": str(user.id)})
        return user

    async def request_password_reset(self, email: str) -> None:
        """Issue an OTP for the user and email it to them."""
        user = self.repository.get_by_email(email)
        if user is None:
            raise UserNotFoundError(email)
        otp = generate_otp()
        self.repository.set_otp(user.id, otp, otp_expiry(self.clock()))
        logger.info("Password reset OTP issued", extra={"user_id": str(user.id)})
        await self.mailer.send(
            to=email,
            subject=RESET_SUBJECT,
            body=f"Your OTP for password reset is: {otp}",
        )

    def reset_password(self, email: str, otp: str, new_password: str) -> None:
        """Set a new password when the OTP is valid, consuming the OTP."""
        user = self.repository.get_by_email(email)
        if user is None:
            raise UserNotFoundError(email)
        if not is_otp_valid(user.otp, user.otp_expires_at, otp, self.clock()):
            raise InvalidOtpError(email)
        self.repository.update_password(user.id, self.hasher.hash(new_password))
        logger.info("Password reset", extra={"user_id": str(user.id)})
