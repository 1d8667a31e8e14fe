"""User service layer."""

from __future__ import annotations

import logging

from course_api.auth.passwords import PasswordHasher
from course_api.core.logging_setup import redact
from course_api.errors import DuplicateAccountError
from course_api.repositories.base import Storage, UserRecord
from course_api.schemas.auth import AuthPrincipal
from course_api.schemas.user import User

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, store: Storage, hasher: PasswordHasher) -> None:
        self._store = store
        self._hasher = hasher

    def register_user(
        self,
        *,
        email_address: str,
        first_name: str,
        last_name: str,
        password: str,
    ) -> User:
        record, created = self._store.create_user_if_absent(
            email_address=email_address,
            first_name=first_name,
            last_name=last_name,
            password_hash=self._hasher.hash(password),
        )
        if not created:
            logger.info("users.register_rejected user=%s reason=already_exists", redact(email_address, prefix="uid"))
            raise DuplicateAccountError(
                f"User not created, {record.email_address} is already tied to an account."
            )

        logger.info("users.registered user_id=%s", record.id)
        return self.to_user(record)

    @staticmethod
    def current_user(principal: AuthPrincipal) -> User:
        return User(
            id=principal.user_id,
            first_name=principal.first_name,
            last_name=principal.last_name,
            email_address=principal.email_address,
        )

    @staticmethod
    def to_user(record: UserRecord) -> User:
        return User(
            id=record.id,
            first_name=record.first_name,
            last_name=record.last_name,
            email_address=record.email_address,
        )
