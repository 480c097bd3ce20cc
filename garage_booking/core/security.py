from datetime import UTC, datetime, timedelta
from uuid import uuid4

from jose import JWTError, jwt
from passlib.context import CryptContext

from garage_booking.core.config import settings

pwd_context = CryptContext(
    schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=settings.bcrypt_rounds
)

ACCESS = "access"
REFRESH = "refresh"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def _encode(subject: str | int, token_type: str, lifetime: timedelta, **claims: str) -> str:
    payload = {
        "sub": str(subject),
        "exp": datetime.now(UTC) + lifetime,
        "type": token_type,
        **claims,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def _decode(token: str, token_type: str) -> dict | None:
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError:
        return None
    if payload.get("type") != token_type or not payload.get("sub"):
        return None
    return payload


def create_access_token(user_id: int) -> str:
    return _encode(user_id, ACCESS, timedelta(minutes=settings.access_token_expire_minutes))


def create_refresh_token(user_id: int) -> str:
    return _encode(
        user_id,
        REFRESH,
        timedelta(days=settings.refresh_token_expire_days),
        jti=str(uuid4()),
    )


def decode_access_token(token: str) -> int | None:
    """Return the user id carried by a valid access token."""
    payload = _decode(token, ACCESS)
    if payload is None:
        return None
    try:
        return int(payload["sub"])
    except ValueError:
        return None


def decode_refresh_token(token: str) -> tuple[int, str] | None:
    """Returns (user_id, jti) or None."""
    payload = _decode(token, REFRESH)
    if payload is None or not payload.get("jti"):
        return None
    try:
        return int(payload["sub"]), payload["jti"]
    except ValueError:
        return None
