from datetime import UTC, datetime, timedelta

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from garage_booking.core.config import settings
from garage_booking.core.security import (
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
    hash_password,
    verify_password,
)
from garage_booking.models.refresh_token import RefreshToken
from garage_booking.models.user import User, UserCreate, UserPublic


async def get_user(session: AsyncSession, user_id: int) -> User | None:
    return await session.get(User, user_id)


async def get_user_by_username(session: AsyncSession, username: str) -> User | None:
    result = await session.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def create_user(session: AsyncSession, data: UserCreate) -> User:
    user = User(
        **data.model_dump(exclude={"password", "is_admin"}),
        hashed_password=hash_password(data.password),
    )
    session.add(user)
    await session.flush()
    await session.refresh(user)
    return user


def user_to_public(user: User) -> UserPublic:
    return UserPublic.model_validate(user)


def make_token_pair(user_id: int) -> tuple[str, str, int]:
    access = create_access_token(user_id)
    refresh = create_refresh_token(user_id)
    expires_in = settings.access_token_expire_minutes * 60
    return access, refresh, expires_in


def _utc_naive() -> datetime:
    """Naive UTC datetime for DB columns that are TIMESTAMP WITHOUT TIME ZONE."""
    return datetime.now(UTC).replace(tzinfo=None)


async def store_refresh_token(session: AsyncSession, refresh_token: str) -> None:
    decoded = decode_refresh_token(refresh_token)
    if decoded is None:
        return
    user_id, jti = decoded
    expires_at = _utc_naive() + timedelta(days=settings.refresh_token_expire_days)
    session.add(RefreshToken(user_id=user_id, jti=jti, expires_at=expires_at))
    await session.flush()


async def _issue_tokens(session: AsyncSession, user: User) -> tuple[User, str, str, int]:
    access, refresh, expires_in = make_token_pair(user.id)
    await store_refresh_token(session, refresh)
    return user, access, refresh, expires_in


async def login_user(
    session: AsyncSession, username: str, password: str
) -> tuple[User, str, str, int] | None:
    user = await get_user_by_username(session, username)
    if not user or not verify_password(password, user.hashed_password):
        return None
    return await _issue_tokens(session, user)


async def register_user(
    session: AsyncSession, data: UserCreate
) -> tuple[User, str, str, int] | None:
    if await get_user_by_username(session, data.username):
        return None
    user = await create_user(session, data)
    return await _issue_tokens(session, user)


async def revoke_refresh_token(session: AsyncSession, jti: str) -> None:
    result = await session.execute(select(RefreshToken).where(RefreshToken.jti == jti))
    row = result.scalar_one_or_none()
    if row:
        row.revoked = True
        session.add(row)


async def refresh_tokens(
    session: AsyncSession, refresh_token: str
) -> tuple[User, str, str, int] | None:
    decoded = decode_refresh_token(refresh_token)
    if decoded is None:
        return None
    user_id, jti = decoded
    result = await session.execute(
        select(RefreshToken).where(
            RefreshToken.jti == jti,
            RefreshToken.revoked == False,  # noqa: E712
            RefreshToken.expires_at > _utc_naive(),
        )
    )
    token_row = result.scalar_one_or_none()
    if not token_row:
        return None
    user = await get_user(session, user_id)
    if not user:
        return None
    token_row.revoked = True
    session.add(token_row)
    return await _issue_tokens(session, user)
