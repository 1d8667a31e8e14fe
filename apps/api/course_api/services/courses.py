"""Course service layer."""

from __future__ import annotations

import logging

from course_api.domain.ownership import ensure_owner
from course_api.errors import NotFoundError
from course_api.repositories.base import CourseFields, CourseRecord, Storage
from course_api.schemas.auth import AuthPrincipal
from course_api.schemas.course import Course, CreateCourseRequest, UpdateCourseRequest
from course_api.services.users import UserService

logger = logging.getLogger(__name__)


def _course_not_found(course_id: int) -> NotFoundError:
    return NotFoundError(f"Course not found, course: {course_id}. Please search for another course.")


def merge_course_changes(payload: UpdateCourseRequest) -> CourseFields:
    """Keep only fields that were provided with a non-blank value."""
    changes: CourseFields = {}
    for name, value in payload.model_dump(exclude_unset=True).items():
        if isinstance(value, str) and value.strip():
            changes[name] = value
    return changes


class CourseService:
    def __init__(self, store: Storage) -> None:
        self._store = store

    def list_courses(self) -> list[Course]:
        return [self._to_course(record) for record in self._store.list_courses()]

    def get_course(self, course_id: int) -> Course:
        return self._to_course(self._load(course_id))

    def create_course(self, *, principal: AuthPrincipal, payload: CreateCourseRequest) -> Course:
        record = self._store.create_course(
            owner_id=principal.user_id,
            fields={
                "title": payload.title,
                "description": payload.description,
                "estimated_time": payload.estimated_time,
                "materials_needed": payload.materials_needed,
            },
        )
        logger.info("courses.created course_id=%s owner_id=%s", record.id, principal.user_id)
        return self._to_course(record)

    def update_course(self, *, principal: AuthPrincipal, course_id: int, payload: UpdateCourseRequest) -> None:
        course = self._load(course_id)
        ensure_owner(principal, course, action="update")

        changes = merge_course_changes(payload)
        if not changes:
            return
        if self._store.update_course(course_id, changes) is None:
            raise _course_not_found(course_id)
        logger.info("courses.updated course_id=%s fields=%s", course_id, ",".join(sorted(changes)))

    def delete_course(self, *, principal: AuthPrincipal, course_id: int) -> None:
        course = self._load(course_id)
        ensure_owner(principal, course, action="delete")

        if not self._store.delete_course(course_id):
            raise _course_not_found(course_id)
        logger.info("courses.deleted course_id=%s", course_id)

    def _load(self, course_id: int) -> CourseRecord:
        record = self._store.find_course(course_id)
        if record is None:
            raise _course_not_found(course_id)
        return record

    def _to_course(self, record: CourseRecord) -> Course:
        owner = self._store.find_user_by_id(record.user_id)
        return Course(
            id=record.id,
            user_id=record.user_id,
            title=record.title,
            description=record.description,
            estimated_time=record.estimated_time,
            materials_needed=record.materials_needed,
            owner=UserService.to_user(owner) if owner is not None else None,
        )
