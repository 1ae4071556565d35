# backend/inventory_api/api/users.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from inventory_api.api.deps import require_admin
from inventory_api.core.database import get_db, transactional
from inventory_api.core.exceptions import BusinessValidationError, NotFoundError
from inventory_api.models.user import User, UserStatusReason
from inventory_api.repositories.catalog_repository import UserRepository
from inventory_api.schemas.common import PageResponse
from inventory_api.schemas.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("", response_model=PageResponse[UserResponse])
async def list_users(
    page: int = Query(0, ge=0),
    size: int = Query(10, ge=1, le=100),
    search: Optional[str] = None,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    result = await UserRepository(db).list(search=search, page=page, page_size=size)
    return PageResponse[UserResponse](
        items=[UserResponse.model_validate(u) for u in result.items],
        total=result.total,
        page=result.page,
        size=result.size,
        total_pages=result.total_pages,
    )


async def _get_user(users: UserRepository, user_id: int) -> User:
    user = await users.get_by_id(user_id)
    if user is None:
        raise NotFoundError(f"User not found with id: {user_id}")
    return user


@router.post("/{user_id}/approve", response_model=UserResponse)
async def approve_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Activate a user waiting for approval (admin only)."""
    users = UserRepository(db)
    async with transactional(db):
        user = await _get_user(users, user_id)
        if user.is_active:
            raise BusinessValidationError("User is already active")
        user.is_active = True
        user.status_reason = None
        await users.save(user)

    logger.info(f"User {user.username} approved by {current_user.username}")
    return UserResponse.model_validate(user)


@router.post("/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(
    user_id: int,
    current_user: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    """Deactivate a user (admin only). Admins cannot deactivate themselves."""
    if user_id == current_user.id:
        raise BusinessValidationError("You cannot deactivate your own account")

    users = UserRepository(db)
    async with transactional(db):
        user = await _get_user(users, user_id)
        user.is_active = False
        user.status_reason = UserStatusReason.DEACTIVATED
        await users.save(user)

    logger.info(f"User {user.username} deactivated by {current_user.username}")
    return UserResponse.model_validate(user)
