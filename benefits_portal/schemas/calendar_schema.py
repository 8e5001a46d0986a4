from typing import Any, Optional
from datetime import datetime

from pydantic import Field, field_validator

from benefits_portal.schemas.base_schema import CamelModel, reject_null


class CalendarEventCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    event_date: datetime
    event_type: str = Field(min_length=1, max_length=50)
    color: Optional[str] = None


class CalendarEventUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    event_date: Optional[datetime] = None
    event_type: Optional[str] = Field(default=None, min_length=1, max_length=50)
    color: Optional[str] = None

    @field_validator("title", "event_date", "event_type")
    @classmethod
    def not_null(cls, value: Any) -> Any:
        return reject_null(value)


class CalendarEvent(CamelModel):
    id: int
    company_id: int
    title: str
    description: Optional[str] = None
    event_date: datetime
    event_type: str
    color: str
