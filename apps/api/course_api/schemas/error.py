"""API error response schemas."""

from typing import Any

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: dict[str, Any] | None = None


class FieldError(BaseModel):
    field: str
    message: str


class ValidationErrorDetails(BaseModel):
    errors: list[FieldError]


class ValidationErrorResponse(BaseModel):
    code: str
    message: str
    details: ValidationErrorDetails
