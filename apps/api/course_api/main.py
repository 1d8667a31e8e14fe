"""FastAPI application entrypoint."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from course_api.auth import extract_basic_credentials
from course_api.core.config import Settings, get_settings
from course_api.core.logging_setup import configure_logging
from course_api.errors import (
    AuthenticationFailure,
    AuthFailureReason,
    AuthorizationFailure,
    DomainError,
    NotFoundError,
    ValidationFailure,
)
from course_api.repositories.base import Storage
from course_api.repositories.memory import InMemoryStore
from course_api.repositories.sqlite import SqliteStore
from course_api.routes import courses_router, users_router
from course_api.routes.dependencies import get_authenticated_principal
from course_api.schemas.error import ErrorResponse

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[DomainError], int] = {
    AuthenticationFailure: 401,
    AuthorizationFailure: 403,
    NotFoundError: 404,
    ValidationFailure: 400,
}

_BLANK_VALUE_ERRORS = frozenset({"missing", "string_too_short"})


def status_for(exc: DomainError) -> int:
    """Map an error to its HTTP status by walking the error's class hierarchy."""
    for cls in type(exc).__mro__:
        status_code = _STATUS_BY_ERROR.get(cls)
        if status_code is not None:
            return status_code
    return 500


def build_store(settings: Settings) -> Storage:
    if settings.storage_backend == "sqlite":
        return SqliteStore(settings.database_path)
    return InMemoryStore()


def _field_errors(exc: RequestValidationError) -> list[dict[str, str]]:
    errors: list[dict[str, str]] = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "path", "query")]
        field = "body" if error.get("type") == "json_invalid" else ".".join(location) or "body"
        if error.get("type") in _BLANK_VALUE_ERRORS:
            message = f'Please provide a value for "{field}"'
        else:
            message = str(error.get("msg", "Invalid value"))
        errors.append({"field": field, "message": message})
    return errors


def _requires_authentication(route: Any) -> bool:
    """Whether the matched route, or any of its sub-dependencies, is behind the auth gate."""
    pending = [getattr(route, "dependant", None)]
    while pending:
        dependant = pending.pop()
        if dependant is None:
            continue
        if dependant.call is get_authenticated_principal:
            return True
        pending.extend(dependant.dependencies)
    return False


def _error_response(status_code: int, payload: ErrorResponse, headers: dict[str, str] | None = None) -> JSONResponse:
    content: dict[str, Any] = payload.model_dump(mode="json", exclude_none=True)
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    store = build_store(settings)
    store.open()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        app.state.store.close()

    app = FastAPI(title="Course Catalog API", version="1.0.0", lifespan=lifespan)
    app.state.store = store
    app.dependency_overrides[get_settings] = lambda: settings

    def render_domain_error(exc: DomainError) -> JSONResponse:
        headers = None
        if isinstance(exc, AuthenticationFailure):
            headers = {"WWW-Authenticate": f'Basic realm="{settings.auth_realm}"'}
        payload = ErrorResponse(code=exc.code, message=exc.message, details=exc.details)
        return _error_response(status_for(exc), payload, headers)

    @app.exception_handler(DomainError)
    async def handle_domain_error(_, exc: DomainError) -> JSONResponse:
        return render_domain_error(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
        # Bodies are parsed before dependencies run, so the auth gate applies here too.
        if _requires_authentication(request.scope.get("route")) and (
            extract_basic_credentials(request.headers.get("Authorization")) is None
        ):
            logger.warning(
                "auth.rejected method=%s path=%s reason=%s",
                request.method,
                request.url.path,
                AuthFailureReason.MISSING_CREDENTIALS.value,
            )
            return render_domain_error(AuthenticationFailure(AuthFailureReason.MISSING_CREDENTIALS))

        return render_domain_error(ValidationFailure("Invalid request payload", errors=_field_errors(exc)))

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("request.failed method=%s path=%s", request.method, request.url.path)
        payload = ErrorResponse(code="INTERNAL_ERROR", message="Internal server error")
        return _error_response(500, payload)

    api_prefix = "/api"
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(courses_router, prefix=api_prefix)

    return app
