"""bcrypt password hashing."""

from __future__ import annotations

from functools import cached_property

import bcrypt


class PasswordHasher:
    """Hashes secrets at registration and verifies them on every request.

    ``bcrypt.checkpw`` compares digests in constant time, and every hash embeds
    its own random salt and cost factor, so hashes made under an older
    ``rounds`` setting keep verifying.
    """

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = rounds

    @property
    def rounds(self) -> int:
        return self._rounds

    def hash(self, secret: str) -> str:
        digest = bcrypt.hashpw(secret.encode("utf-8"), bcrypt.gensalt(rounds=self._rounds))
        return digest.decode("ascii")

    def verify(self, secret: str, stored_hash: str) -> bool:
        try:
            return bcrypt.checkpw(secret.encode("utf-8"), stored_hash.encode("ascii"))
        except (ValueError, UnicodeEncodeError):
            # Malformed stored hash or a secret over bcrypt's 72-byte limit.
            return False

    @cached_property
    def _placeholder_hash(self) -> str:
        return self.hash("placeholder-secret")

    def burn(self, secret: str) -> None:
        """Spend one verification's worth of work without a real hash.

        Used when no principal matched, so that path takes as long as a wrong
        secret does.
        """
        self.verify(secret, self._placeholder_hash)


__all__ = ["PasswordHasher"]
