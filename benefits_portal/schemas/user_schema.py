from pydantic import Field, EmailStr, field_validator
from typing import Optional
from datetime import datetime

from benefits_portal.schemas.base_schema import CamelModel
from benefits_portal.models.user_model import UserRole


class UserBase(CamelModel):
    username: str = Field(min_length=3, max_length=255)
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None


class UserRegistration(UserBase):
    password: str = Field(min_length=6)
    company_id: int


class UserLogin(CamelModel):
    username: str
    password: str


class UserCreate(UserBase):
    """Account created by an admin inside a company."""
    password: str = Field(min_length=6)
    role: str = UserRole.USER.value
    company_id: Optional[int] = None
    is_active: bool = True

    @field_validator("role")
    @classmethod
    def check_role(cls, value: str) -> str:
        if value not in {r.value for r in UserRole}:
            raise ValueError("role must be one of user, admin, superadmin")
        return value


class UserUpdate(CamelModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    password: Optional[str] = Field(default=None, min_length=6)
    role: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("role")
    @classmethod
    def check_role(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in {r.value for r in UserRole}:
            raise ValueError("role must be one of user, admin, superadmin")
        return value


class User(UserBase):
    id: int
    role: str
    company_id: Optional[int] = None
    is_active: Optional[bool] = None
    created_at: Optional[datetime] = None
