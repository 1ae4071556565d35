# backend/inventory_api/api/deps.py
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from inventory_api.core.database import get_db
from inventory_api.core.exceptions import PermissionDeniedError
from inventory_api.core.security import verify_access_token
from inventory_api.models.user import User
from inventory_api.repositories.catalog_repository import UserRepository
from inventory_api.services.permission_service import Actor

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


def _credentials_error(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    try:
        payload = verify_access_token(token)
    except ValueError:
        raise _credentials_error()

    username = payload.get("sub")
    if not username:
        raise _credentials_error()

    user = await UserRepository(db).get_by_username(username)
    if user is None:
        raise _credentials_error()
    if not user.is_active:
        raise _credentials_error("Account is not active")
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    if not current_user.is_admin:
        raise PermissionDeniedError("Admin access required")
    return current_user


async def get_actor(current_user: User = Depends(get_current_user)) -> Actor:
    return Actor.from_user(current_user)
