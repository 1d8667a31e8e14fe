"""Storage records and the storage interface consumed by services."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TypedDict


@dataclass(slots=True)
class UserRecord:
    id: int
    first_name: str
    last_name: str
    email_address: str
    password_hash: str = field(repr=False)


@dataclass(slots=True)
class CourseRecord:
    id: int
    user_id: int
    title: str
    description: str
    estimated_time: str | None = None
    materials_needed: str | None = None


class CourseFields(TypedDict, total=False):
    title: str
    description: str
    estimated_time: str | None
    materials_needed: str | None


COURSE_FIELD_NAMES: tuple[str, ...] = ("title", "description", "estimated_time", "materials_needed")


class Storage(ABC):
    """Persistence operations for users and courses.

    Implementations must keep ``email_address`` unique across users even under
    concurrent ``create_user_if_absent`` calls.
    """

    def open(self) -> None:
        """Acquire resources before serving requests."""

    def close(self) -> None:
        """Release resources on shutdown."""

    @abstractmethod
    def find_user_by_email(self, email_address: str) -> UserRecord | None:
        """Exact-match lookup on the unique username column."""

    @abstractmethod
    def find_user_by_id(self, user_id: int) -> UserRecord | None: ...

    @abstractmethod
    def create_user_if_absent(
        self,
        *,
        email_address: str,
        first_name: str,
        last_name: str,
        password_hash: str,
    ) -> tuple[UserRecord, bool]:
        """Return the stored user and whether this call created it."""

    @abstractmethod
    def list_courses(self) -> list[CourseRecord]: ...

    @abstractmethod
    def find_course(self, course_id: int) -> CourseRecord | None: ...

    @abstractmethod
    def create_course(self, *, owner_id: int, fields: CourseFields) -> CourseRecord: ...

    @abstractmethod
    def update_course(self, course_id: int, fields: CourseFields) -> CourseRecord | None:
        """Overwrite only the given fields; ``None`` if the course is gone."""

    @abstractmethod
    def delete_course(self, course_id: int) -> bool:
        """Remove a course; ``False`` if it did not exist."""


__all__ = ["COURSE_FIELD_NAMES", "CourseFields", "CourseRecord", "Storage", "UserRecord"]
