"""Course routes.

Reads are public; create, update and delete require basic credentials, and
update/delete additionally require the caller to own the course.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Path, Response, status
from starlette.concurrency import run_in_threadpool

from course_api.routes.dependencies import get_authenticated_principal, get_course_service
from course_api.schemas.auth import AuthPrincipal
from course_api.schemas.course import Course, CreateCourseRequest, UpdateCourseRequest
from course_api.schemas.error import ErrorResponse, ValidationErrorResponse
from course_api.services.courses import CourseService

router = APIRouter(prefix="/courses", tags=["Courses"])

# Bounded to the signed 64-bit range of an SQLite INTEGER key.
CourseId = Annotated[int, Path(alias="courseId", ge=1, le=2**63 - 1)]


@router.get("", response_model=list[Course])
async def list_courses(
    service: Annotated[CourseService, Depends(get_course_service)],
) -> list[Course]:
    return await run_in_threadpool(service.list_courses)


@router.get(
    "/{courseId}",
    response_model=Course,
    responses={404: {"model": ErrorResponse}},
)
async def get_course(
    course_id: CourseId,
    service: Annotated[CourseService, Depends(get_course_service)],
) -> Course:
    return await run_in_threadpool(service.get_course, course_id)


@router.post(
    "",
    response_model=Course,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ValidationErrorResponse}, 401: {"model": ErrorResponse}},
)
async def create_course(
    payload: CreateCourseRequest,
    response: Response,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> Course:
    course = await run_in_threadpool(service.create_course, principal=principal, payload=payload)
    response.headers["Location"] = f"/api/courses/{course.id}"
    return course


@router.put(
    "/{courseId}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        400: {"model": ValidationErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def update_course(
    course_id: CourseId,
    payload: UpdateCourseRequest,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> Response:
    await run_in_threadpool(service.update_course, principal=principal, course_id=course_id, payload=payload)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete(
    "/{courseId}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
async def delete_course(
    course_id: CourseId,
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
    service: Annotated[CourseService, Depends(get_course_service)],
) -> Response:
    await run_in_threadpool(service.delete_course, principal=principal, course_id=course_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
