"""User API schemas."""

from pydantic import EmailStr, Field, field_validator

from course_api.schemas.base import CamelModel

# bcrypt only considers the first 72 bytes of a secret.
MAX_PASSWORD_BYTES = 72


class RegisterUserRequest(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email_address: EmailStr
    password: str = Field(min_length=1, repr=False)

    @field_validator("first_name", "last_name")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value

    @field_validator("password")
    @classmethod
    def _fit_bcrypt_limit(cls, value: str) -> str:
        if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
        return value


class User(CamelModel):
    id: int
    first_name: str
    last_name: str
    email_address: str
