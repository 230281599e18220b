"""Password hashing with Argon2id."""

from __future__ import annotations

from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError


class PasswordEncoder:
    """Argon2id password encoder with library defaults."""

    def __init__(self, hasher: Optional[PasswordHasher] = None) -> None:
        self._hasher = hasher or PasswordHasher()

    def encode(self, raw_password: str) -> str:
        return self._hasher.hash(raw_password)

    def matches(self, raw_password: str, encoded_password: Optional[str]) -> bool:
        if not encoded_password:
            return False
        try:
            return self._hasher.verify(encoded_password, raw_password)
        except (VerifyMismatchError, InvalidHashError, VerificationError):
            return False

    def needs_rehash(self, encoded_password: str) -> bool:
        return self._hasher.check_needs_rehash(encoded_password)
