"""Ownership rules for mutating owned courses."""

from enum import Enum

from course_api.errors import AuthorizationFailure
from course_api.repositories.base import CourseRecord
from course_api.schemas.auth import AuthPrincipal


class Decision(str, Enum):
    PERMIT = "PERMIT"
    DENY = "DENY"


def authorize(principal_id: int, owner_id: int) -> Decision:
    """Permit exactly when the principal is the recorded owner."""
    return Decision.PERMIT if principal_id == owner_id else Decision.DENY


def ensure_owner(principal: AuthPrincipal, course: CourseRecord, *, action: str) -> None:
    """Raise when ``principal`` may not ``action`` the course."""
    if authorize(principal.user_id, course.user_id) is Decision.DENY:
        raise AuthorizationFailure(
            f"You are not allowed to {action} the course: {course.id}.",
            details={"action": action, "course_id": course.id},
        )
