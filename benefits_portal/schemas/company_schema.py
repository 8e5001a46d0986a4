from pydantic import Field, field_validator
from typing import Any, Optional
from datetime import datetime

from benefits_portal.schemas.base_schema import CamelModel, reject_null
from benefits_portal.models.company_model import (
    DEFAULT_PRIMARY_COLOR,
    DEFAULT_SECONDARY_COLOR,
    DEFAULT_ACCENT_COLOR,
)

COMPANY_STATUSES = ("active", "inactive")


class CompanyBase(CamelModel):
    name: str = Field(min_length=1, max_length=255)
    slug: str = Field(min_length=1, max_length=100, pattern=r"^[a-z0-9][a-z0-9-]*$")
    domain: Optional[str] = None
    address: Optional[str] = None
    status: str = "active"

    @field_validator("status")
    @classmethod
    def check_status(cls, value: str) -> str:
        if value not in COMPANY_STATUSES:
            raise ValueError(f"status must be one of {', '.join(COMPANY_STATUSES)}")
        return value


class CompanyCreate(CompanyBase):
    pass


class CompanyUpdate(CamelModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    slug: Optional[str] = Field(default=None, min_length=1, max_length=100, pattern=r"^[a-z0-9][a-z0-9-]*$")
    domain: Optional[str] = None
    address: Optional[str] = None
    status: Optional[str] = None

    @field_validator("name", "slug", "status")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return reject_null(value)

    @field_validator("status")
    @classmethod
    def check_status(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and value not in COMPANY_STATUSES:
            raise ValueError(f"status must be one of {', '.join(COMPANY_STATUSES)}")
        return value


class Company(CompanyBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class CompanySettingsUpdate(CamelModel):
    name: Optional[str] = None
    logo: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    accent_color: Optional[str] = None
    website: Optional[str] = None
    contact_email: Optional[str] = None
    address: Optional[str] = None
    ai_assistant_name: Optional[str] = None
    survey_generation_prompt: Optional[str] = None
    website_prompt: Optional[str] = None


class CompanySettings(CamelModel):
    id: Optional[int] = None
    company_id: int
    name: Optional[str] = None
    logo: Optional[str] = None
    primary_color: str = DEFAULT_PRIMARY_COLOR
    secondary_color: str = DEFAULT_SECONDARY_COLOR
    accent_color: str = DEFAULT_ACCENT_COLOR
    website: Optional[str] = None
    contact_email: Optional[str] = None
    address: Optional[str] = None
    ai_assistant_name: Optional[str] = None
    survey_generation_prompt: Optional[str] = None
    website_prompt: Optional[str] = None
    updated_at: Optional[datetime] = None
