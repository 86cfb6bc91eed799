"""Argon2 password hashing."""

from dataclasses import dataclass, field

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

from image_describer.services.accounts import PasswordHasher as PasswordHasherProtocol


@dataclass
class Argon2PasswordHasher(PasswordHasherProtocol):
    """Salted argon2id hashes via argon2-cffi."""

    hasher: PasswordHasher = field(default_factory=PasswordHasher)

    def hash(self, password: str) -> str:
        """Return an encoded argon2 hash including its salt."""
        return self.hasher.hash(password)

    def verify(self, password_hash: str, password: str) -> bool:
        """Return true when the password matches the stored hash."""
        try:
            return self.hasher.verify(password_hash, password)
        except (VerificationError, InvalidHashError):
            return False
