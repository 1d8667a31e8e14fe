"""Dependency wiring for routes."""

import logging
from functools import lru_cache
from typing import Annotated
from uuid import uuid4

from fastapi import Depends, Request, Security
from fastapi.security import HTTPBasic
from starlette.concurrency import run_in_threadpool

from course_api.auth import Authenticator, IdentityResolver, PasswordHasher, extract_basic_credentials
from course_api.core.config import Settings, get_settings
from course_api.core.logging_setup import redact
from course_api.errors import AuthenticationFailure
from course_api.repositories.base import Storage
from course_api.schemas.auth import AuthPrincipal, BasicCredentials
from course_api.services.courses import CourseService
from course_api.services.users import UserService

logger = logging.getLogger(__name__)


class LenientHTTPBasic(HTTPBasic):
    """``HTTPBasic`` that reports malformed headers as absent instead of raising."""

    async def __call__(self, request: Request) -> BasicCredentials | None:  # type: ignore[override]
        return extract_basic_credentials(request.headers.get("Authorization"))


basic_scheme = LenientHTTPBasic(scheme_name="basicAuth", auto_error=False)


def get_request_correlation_id(request: Request) -> str:
    return request.headers.get("X-Correlation-Id") or f"req-{uuid4()}"


def get_store(request: Request) -> Storage:
    return request.app.state.store


@lru_cache(maxsize=4)
def _hasher_for_rounds(rounds: int) -> PasswordHasher:
    return PasswordHasher(rounds=rounds)


def get_password_hasher(settings: Annotated[Settings, Depends(get_settings)]) -> PasswordHasher:
    return _hasher_for_rounds(settings.bcrypt_rounds)


def get_authenticator(
    store: Annotated[Storage, Depends(get_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> Authenticator:
    return Authenticator(IdentityResolver(store), hasher)


async def get_authenticated_principal(
    request: Request,
    credentials: Annotated[BasicCredentials | None, Security(basic_scheme)],
    authenticator: Annotated[Authenticator, Depends(get_authenticator)],
    correlation_id: Annotated[str, Depends(get_request_correlation_id)],
) -> AuthPrincipal:
    """Gate for protected routes: returns the principal or raises ``AuthenticationFailure``."""
    safe_correlation_id = redact(correlation_id, prefix="cid")
    try:
        principal = await run_in_threadpool(authenticator.authenticate, credentials)
    except AuthenticationFailure as exc:
        logger.warning(
            "auth.rejected correlation_id=%s method=%s path=%s user=%s reason=%s",
            safe_correlation_id,
            request.method,
            request.url.path,
            redact(credentials.username if credentials else None, prefix="uid"),
            exc.reason.value,
        )
        raise

    logger.info(
        "auth.accepted correlation_id=%s method=%s path=%s principal_id=%s",
        safe_correlation_id,
        request.method,
        request.url.path,
        redact(principal.user_id, prefix="pid"),
    )
    return principal


def get_user_service(
    store: Annotated[Storage, Depends(get_store)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> UserService:
    return UserService(store, hasher)


def get_course_service(store: Annotated[Storage, Depends(get_store)]) -> CourseService:
    return CourseService(store)
