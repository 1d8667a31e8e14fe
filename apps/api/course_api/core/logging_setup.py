"""Logging setup and redaction helpers for log fields."""

from __future__ import annotations

import hashlib
import logging
from typing import Any

PACKAGE_LOGGER = "course_api"


def configure_logging(level: str) -> None:
    """Apply the configured level to the package logger tree."""
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level.upper())
    if not logging.getLogger().handlers and not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
        logger.addHandler(handler)


def redact(value: Any, *, prefix: str) -> str:
    """Replace a personal identifier with a stable token usable for log correlation."""
    text = str(value or "").strip()
    if not text:
        return f"{prefix}-none"

    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()[:12]
    return f"{prefix}-{digest}"
