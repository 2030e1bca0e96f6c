"""User accounts and login sessions."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from .base import ApiModel, new_id, utc_now


class UserRole(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    BIDDER = "bidder"
    FINANCE_MANAGER = "finance_manager"
    ANALYST = "analyst"


EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class UserPublic(ApiModel):
    """User as returned by the API (no credentials)."""

    id: str
    username: str
    email: str
    name: str
    role: UserRole
    department: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class User(UserPublic):
    """Stored user record."""

    id: str = Field(default_factory=new_id)
    password_hash: str
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    def public(self) -> UserPublic:
        return UserPublic.model_validate(self.model_dump(exclude={"password_hash", "updated_at"}))


class UserCreate(ApiModel):
    username: str = Field(..., min_length=3, max_length=50)
    email: str = Field(..., pattern=EMAIL_PATTERN)
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1)
    role: UserRole = UserRole.BIDDER
    department: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=15)


class UserUpdate(ApiModel):
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN)
    name: Optional[str] = Field(None, min_length=1)
    role: Optional[UserRole] = None
    department: Optional[str] = None
    phone: Optional[str] = Field(None, max_length=15)
    is_active: Optional[bool] = None


class LoginRequest(ApiModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class LoginResponse(ApiModel):
    user: UserPublic
    token: str


class UserSession(ApiModel):
    """Server-side session backing a JWT; deleting it revokes the token."""

    id: str = Field(default_factory=new_id)
    user_id: str
    expires_at: datetime
    created_at: datetime = Field(default_factory=utc_now)
    last_accessed: datetime = Field(default_factory=utc_now)
