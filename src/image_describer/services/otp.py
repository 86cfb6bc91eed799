"""One-time password helpers for password resets."""

import secrets
from datetime import datetime, timedelta

OTP_TTL = timedelta(hours=1)


def generate_otp() -> str:
    """Return a 6 character hex OTP built from 3 random bytes."""
    return secrets.token_hex(3)


def otp_expiry(issued_at: datetime) -> datetime:
    """Return the instant after which an OTP issued at issued_at is invalid."""
    return issued_at + OTP_TTL


def is_otp_valid(
    expected: str | None,
    expires_at: datetime | None,
    provided: str | None,
    now: datetime,
) -> bool:
    """Return true when the provided OTP matches and has not expired."""
    if not expected or expires_at is None or provided is None:
        return False
    if not secrets.compare_digest(expected.encode(), provided.encode()):
        return False
    return now <= expires_at
