"""Authentication schemas."""

from pydantic import BaseModel, Field


class BasicCredentials(BaseModel):
    """Username/secret pair decoded from a ``Basic`` authorization header."""

    username: str
    secret: str = Field(repr=False)


class AuthPrincipal(BaseModel):
    """Authenticated user as seen by handlers; never carries the password hash."""

    user_id: int
    email_address: str
    first_name: str
    last_name: str
