"""Principal lookup by username."""

from __future__ import annotations

from course_api.repositories.base import Storage, UserRecord


class IdentityResolver:
    def __init__(self, store: Storage) -> None:
        self._store = store

    def resolve(self, username: str) -> UserRecord | None:
        """Exact, case-sensitive match on the stored email address."""
        return self._store.find_user_by_email(username)


__all__ = ["IdentityResolver"]
