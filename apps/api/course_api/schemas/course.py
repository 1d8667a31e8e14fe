"""Course API schemas."""

from pydantic import Field, field_validator

from course_api.schemas.base import CamelModel
from course_api.schemas.user import User


class CreateCourseRequest(CamelModel):
    title: str = Field(min_length=1)
    description: str = Field(min_length=1)
    estimated_time: str | None = None
    materials_needed: str | None = None

    @field_validator("title", "description")
    @classmethod
    def _reject_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class UpdateCourseRequest(CamelModel):
    """Partial update; omitted or blank fields keep their stored value."""

    title: str | None = None
    description: str | None = None
    estimated_time: str | None = None
    materials_needed: str | None = None


class Course(CamelModel):
    id: int
    user_id: int
    title: str
    description: str
    estimated_time: str | None = None
    materials_needed: str | None = None
    owner: User | None = None
