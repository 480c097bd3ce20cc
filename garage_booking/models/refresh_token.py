from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel


class RefreshToken(SQLModel, table=True):
    """Issued refresh token; rotation revokes the old row and stores the new jti."""

    __tablename__ = "refresh_tokens"
    id: int | None = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="users.id", ondelete="CASCADE", index=True)
    jti: str = Field(unique=True, index=True)
    expires_at: datetime = Field(sa_type=DateTime, index=True)  # naive UTC
    revoked: bool = False
