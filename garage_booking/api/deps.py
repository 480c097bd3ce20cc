from typing import Protocol

from fastapi import Depends, Header, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from garage_booking.core.db import get_session
from garage_booking.core.security import decode_access_token
from garage_booking.models.garage import Garage
from garage_booking.models.user import User
from garage_booking.services.garage_service import get_garage

security = HTTPBearer(auto_error=False)

__all__ = ["get_session", "get_current_user", "refresh_header", "ensure_owned", "get_garage_or_404"]


class Owned(Protocol):
    user_id: int


def refresh_header(x_refresh_token: str | None = Header(default=None, alias="X-Refresh-Token")) -> str | None:
    """Extract X-Refresh-Token header for logout/refresh endpoints."""
    return x_refresh_token


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    session: AsyncSession = Depends(get_session),
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> User:
    if not credentials or credentials.scheme.lower() != "bearer":
        raise _unauthorized("Not authenticated")
    user_id = decode_access_token(credentials.credentials)
    if user_id is None:
        raise _unauthorized("Invalid or expired token")
    user = await session.get(User, user_id)
    if not user:
        raise _unauthorized("User not found")
    return user


def ensure_owned(resource: Owned | None, user: User, name: str) -> None:
    """404 when missing, 403 when it belongs to someone else."""
    if resource is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{name} not found")
    if resource.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")


async def get_garage_or_404(session: AsyncSession, garage_id: int) -> Garage:
    garage = await get_garage(session, garage_id)
    if not garage:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Garage not found")
    return garage
