# backend/inventory_api/api/auth.py
import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from inventory_api.api.deps import get_current_user
from inventory_api.core.database import get_db, transactional
from inventory_api.core.exceptions import AccountInactiveError, DuplicateResourceError
from inventory_api.core.security import create_user_token, hash_password, verify_password
from inventory_api.models.user import User, UserRole, UserStatusReason
from inventory_api.repositories.catalog_repository import UserRepository
from inventory_api.schemas.user import LoginRequest, RegisterRequest, TokenResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(req: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Self-registration. The account stays inactive until an admin approves it."""
    users = UserRepository(db)
    async with transactional(db):
        if await users.get_by_username(req.username):
            raise DuplicateResourceError("Username already exists")
        if await users.get_by_email(req.email):
            raise DuplicateResourceError("Email already in use")

        user = await users.save(
            User(
                username=req.username,
                email=req.email,
                password_hash=hash_password(req.password),
                first_name=req.first_name,
                last_name=req.last_name,
                role=UserRole.STAFF.value,
                is_active=False,
                status_reason=UserStatusReason.PENDING_APPROVAL,
            )
        )

    logger.info(f"User {user.username} registered, pending approval")
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(req: LoginRequest, db: AsyncSession = Depends(get_db)):
    users = UserRepository(db)
    user = await users.get_by_username(req.username)

    if not user or not verify_password(req.password, user.password_hash):
        raise HTTPException(status_code=401, detail="Invalid credentials")

    if not user.is_active:
        if user.status_reason == UserStatusReason.PENDING_APPROVAL:
            raise AccountInactiveError("Your account is pending approval by an administrator")
        raise AccountInactiveError("Your account is not active")

    async with transactional(db):
        user.last_login_date = datetime.utcnow()
        await users.save(user)

    token = create_user_token(user.id, user.username, user.role)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    return UserResponse.model_validate(current_user)
