"""In-memory storage used by default and in tests."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from itertools import count

from course_api.repositories.base import (
    COURSE_FIELD_NAMES,
    CourseFields,
    CourseRecord,
    Storage,
    UserRecord,
)


@dataclass(slots=True)
class InMemoryStore(Storage):
    """Simple, deterministic persistence layer.

    Returned records are copies, so callers cannot mutate stored state without
    going through the store.
    """

    users: dict[int, UserRecord] = field(default_factory=dict)
    courses: dict[int, CourseRecord] = field(default_factory=dict)
    user_write_count: int = 0
    course_write_count: int = 0
    _user_ids_by_email: dict[str, int] = field(default_factory=dict, repr=False)
    _user_ids: count = field(default_factory=lambda: count(1), repr=False, compare=False)
    _course_ids: count = field(default_factory=lambda: count(1), repr=False, compare=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def find_user_by_email(self, email_address: str) -> UserRecord | None:
        with self._lock:
            user_id = self._user_ids_by_email.get(email_address)
            if user_id is None:
                return None
            return replace(self.users[user_id])

    def find_user_by_id(self, user_id: int) -> UserRecord | None:
        with self._lock:
            user = self.users.get(user_id)
            return replace(user) if user is not None else None

    def create_user_if_absent(
        self,
        *,
        email_address: str,
        first_name: str,
        last_name: str,
        password_hash: str,
    ) -> tuple[UserRecord, bool]:
        with self._lock:
            existing_id = self._user_ids_by_email.get(email_address)
            if existing_id is not None:
                return replace(self.users[existing_id]), False

            user = UserRecord(
                id=next(self._user_ids),
                first_name=first_name,
                last_name=last_name,
                email_address=email_address,
                password_hash=password_hash,
            )
            self.users[user.id] = user
            self._user_ids_by_email[email_address] = user.id
            self.user_write_count += 1
            return replace(user), True

    def list_courses(self) -> list[CourseRecord]:
        with self._lock:
            return [replace(self.courses[course_id]) for course_id in sorted(self.courses)]

    def find_course(self, course_id: int) -> CourseRecord | None:
        with self._lock:
            course = self.courses.get(course_id)
            return replace(course) if course is not None else None

    def create_course(self, *, owner_id: int, fields: CourseFields) -> CourseRecord:
        with self._lock:
            if owner_id not in self.users:
                raise ValueError(f"Unknown course owner: {owner_id}")
            course = CourseRecord(
                id=next(self._course_ids),
                user_id=owner_id,
                title=fields["title"],
                description=fields["description"],
                estimated_time=fields.get("estimated_time"),
                materials_needed=fields.get("materials_needed"),
            )
            self.courses[course.id] = course
            self.course_write_count += 1
            return replace(course)

    def update_course(self, course_id: int, fields: CourseFields) -> CourseRecord | None:
        with self._lock:
            course = self.courses.get(course_id)
            if course is None:
                return None
            changes = {name: fields[name] for name in COURSE_FIELD_NAMES if name in fields}
            updated = replace(course, **changes)
            self.courses[course_id] = updated
            self.course_write_count += 1
            return replace(updated)

    def delete_course(self, course_id: int) -> bool:
        with self._lock:
            if self.courses.pop(course_id, None) is None:
                return False
            self.course_write_count += 1
            return True
