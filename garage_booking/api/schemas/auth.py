from typing import Literal

from pydantic import EmailStr, Field

from garage_booking.api.schemas.base import CamelModel


class LoginRequest(CamelModel):
    username: str
    password: str


class RegisterRequest(CamelModel):
    username: str = Field(min_length=3)
    password: str = Field(min_length=6)
    email: EmailStr
    full_name: str = Field(min_length=1)
    is_tunisian: bool = True
    document_type: Literal["CIN", "Passport"] = "CIN"
    document_number: str | None = None
    phone_number: str | None = None


class TokenPair(CamelModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


class RefreshRequest(CamelModel):
    refresh_token: str


class UserResponse(CamelModel):
    id: int
    username: str
    email: str
    full_name: str
    is_admin: bool
    is_tunisian: bool
    document_type: str
    document_number: str | None = None
    phone_number: str | None = None
