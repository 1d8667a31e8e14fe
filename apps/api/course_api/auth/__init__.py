"""Authentication: header parsing, password hashing and principal resolution."""

from .authenticator import Authenticator, to_principal
from .credentials import extract_basic_credentials
from .identity import IdentityResolver
from .passwords import PasswordHasher

__all__ = [
    "Authenticator",
    "IdentityResolver",
    "PasswordHasher",
    "extract_basic_credentials",
    "to_principal",
]
