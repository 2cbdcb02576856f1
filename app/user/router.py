"""User domain router.

Administrative user management. Every route requires an access token whose
role is ``admin``.
"""

import uuid

from fastapi import APIRouter, Depends, Query, status

from app.auth.dependencies import UsersServiceDep, require_roles
from app.core.constants import CommonResponses, Routes
from app.user.exceptions import UserNotFoundError
from app.user.models import Role
from app.user.schemas import UserCreate, UserRead, UserUpdate

router = APIRouter(
    prefix=Routes.USER.prefix,
    tags=[Routes.USER.tag],
    dependencies=[Depends(require_roles(Role.admin))],
    responses={
        **CommonResponses.UNAUTHORIZED,
        **CommonResponses.FORBIDDEN,
    },
)


@router.get("", response_model=list[UserRead])
async def list_users(
    users: UsersServiceDep,
    offset: int = Query(default=0, ge=0),
    limit: int = Query(default=50, ge=1, le=100),
):
    """List users, oldest first."""
    return await users.find_many(offset=offset, limit=limit)


@router.post(
    "",
    response_model=UserRead,
    status_code=status.HTTP_201_CREATED,
    responses={**CommonResponses.UNPROCESSABLE},
)
async def create_user(payload: UserCreate, users: UsersServiceDep):
    """Create a user with any role, status or provider."""
    return await users.create(payload)


@router.get(
    "/{user_id}",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND},
)
async def get_user(user_id: uuid.UUID, users: UsersServiceDep):
    user = await users.find_by_id(user_id)
    if user is None:
        raise UserNotFoundError()
    return user


@router.patch(
    "/{user_id}",
    response_model=UserRead,
    responses={**CommonResponses.NOT_FOUND, **CommonResponses.UNPROCESSABLE},
)
async def update_user(user_id: uuid.UUID, payload: UserUpdate, users: UsersServiceDep):
    """Update a user. Only fields present in the body are changed."""
    user = await users.update(user_id, payload)
    if user is None:
        raise UserNotFoundError()
    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(user_id: uuid.UUID, users: UsersServiceDep) -> None:
    await users.remove(user_id)
