"""User routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response, status
from starlette.concurrency import run_in_threadpool

from course_api.routes.dependencies import get_authenticated_principal, get_user_service
from course_api.schemas.auth import AuthPrincipal
from course_api.schemas.error import ErrorResponse, ValidationErrorResponse
from course_api.schemas.user import RegisterUserRequest, User
from course_api.services.users import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "",
    response_model=User,
    responses={401: {"model": ErrorResponse}},
)
async def get_current_user(
    principal: Annotated[AuthPrincipal, Depends(get_authenticated_principal)],
) -> User:
    return UserService.current_user(principal)


@router.post(
    "",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ValidationErrorResponse}},
)
async def register_user(
    payload: RegisterUserRequest,
    response: Response,
    service: Annotated[UserService, Depends(get_user_service)],
) -> User:
    user = await run_in_threadpool(
        service.register_user,
        email_address=str(payload.email_address),
        first_name=payload.first_name,
        last_name=payload.last_name,
        password=payload.password,
    )
    response.headers["Location"] = "/"
    return user
