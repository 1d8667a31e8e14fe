"""Credential checking for protected requests."""

from __future__ import annotations

from course_api.auth.identity import IdentityResolver
from course_api.auth.passwords import PasswordHasher
from course_api.errors import AuthenticationFailure, AuthFailureReason
from course_api.repositories.base import UserRecord
from course_api.schemas.auth import AuthPrincipal, BasicCredentials


def to_principal(user: UserRecord) -> AuthPrincipal:
    return AuthPrincipal(
        user_id=user.id,
        email_address=user.email_address,
        first_name=user.first_name,
        last_name=user.last_name,
    )


class Authenticator:
    """Turns request credentials into an authenticated principal.

    Steps run in order and stop at the first failure: credentials present,
    principal found, secret matches. Storage is only read.
    """

    def __init__(self, resolver: IdentityResolver, hasher: PasswordHasher) -> None:
        self._resolver = resolver
        self._hasher = hasher

    def authenticate(self, credentials: BasicCredentials | None) -> AuthPrincipal:
        if credentials is None:
            raise AuthenticationFailure(AuthFailureReason.MISSING_CREDENTIALS)

        user = self._resolver.resolve(credentials.username)
        if user is None:
            self._hasher.burn(credentials.secret)
            raise AuthenticationFailure(AuthFailureReason.UNKNOWN_PRINCIPAL)

        if not self._hasher.verify(credentials.secret, user.password_hash):
            raise AuthenticationFailure(AuthFailureReason.BAD_SECRET)

        return to_principal(user)


__all__ = ["Authenticator", "to_principal"]
