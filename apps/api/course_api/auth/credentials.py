"""Basic authorization header parsing."""

from __future__ import annotations

import base64
import binascii

from course_api.schemas.auth import BasicCredentials


def extract_basic_credentials(authorization: str | None) -> BasicCredentials | None:
    """Decode ``Basic <base64(username:secret)>`` into a credentials pair.

    Anything missing or malformed yields ``None``; this function never raises.
    The secret may itself contain colons, only the first one separates it from
    the username.
    """
    if not authorization:
        return None

    scheme, _, payload = authorization.strip().partition(" ")
    if scheme.lower() != "basic":
        return None

    payload = payload.strip()
    if not payload:
        return None

    try:
        decoded = base64.b64decode(payload, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None

    username, separator, secret = decoded.partition(":")
    if not separator or not username:
        return None

    return BasicCredentials(username=username, secret=secret)


__all__ = ["extract_basic_credentials"]
