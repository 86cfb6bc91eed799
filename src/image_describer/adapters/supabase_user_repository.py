"""Supabase-backed user repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from image_describer.domain.errors import UsernameTakenError
from image_describer.domain.models import UserRecord
from image_describer.services.accounts import UserRepository

_USER_COLUMNS = "id, username, email, password_hash, otp, otp_expires_at"
_UNIQUE_VIOLATION = "23505"


@dataclass
class SupabaseUserRepository(UserRepository):
    """Supabase implementation for user persistence."""

    client: Client

    def get_by_username(self, username: str) -> UserRecord | None:
        """Return the user with the given username, if present."""
        return self._get_one("username", username)

    def get_by_email(self, email: str) -> UserRecord | None:
        """Return the user with the given email, if present."""
        return self._get_one("email", email)

    def create_user(self, username: str, email: str, password_hash: str) -> UserRecord:
        """Create a new user row and return it."""
        try:
            response = (
                self.client.table("users")
                .insert(
                    {
                        "username": username,
                        "email": email,
                        "password_hash": password_hash,
                    }
                )
                .execute()
            )
        except APIError as exc:
            if exc.code == _UNIQUE_VIOLATION:
                raise UsernameTakenError(username) from exc
            raise
        if not response.data:
            raise RuntimeError("Failed to create user in Supabase")
        return _parse_user(response.data[0])

    def set_otp(self, user_id: UUID, otp: str, expires_at: datetime) -> None:
        """Store a pending reset OTP and its expiry."""
        self.client.table("users").update(
            {"otp": otp, "otp_expires_at": expires_at.isoformat()}
        ).eq("id", str(user_id)).execute()

    def update_password(self, user_id: UUID, password_hash: str) -> None:
        """Replace the password hash and clear the OTP columns."""
        self.client.table("users").update(
            {"password_hash": password_hash, "otp": None, "otp_expires_at": None}
        ).eq("id", str(user_id)).execute()

    def _get_one(self, column: str, value: str) -> UserRecord | None:
        response = (
            self.client.table("users")
            .select(_USER_COLUMNS)
            .eq(column, value)
            .limit(1)
            .execute()
        )
        if response.data:
            return _parse_user(response.data[0])
        return None


def _parse_user(row: dict[str, object]) -> UserRecord:
    expires_raw = row.get("otp_expires_at")
    return UserRecord(
        id=UUID(str(row["id"])),
        username=str(row["username"]),
        email=str(row.get("email") or ""),
        password_hash=str(row.get("password_hash") or ""),
        otp=row.get("otp") or None,
        otp_expires_at=(
            datetime.fromisoformat(expires_raw)
            if isinstance(expires_raw, str) and expires_raw
            else None
        ),
    )
