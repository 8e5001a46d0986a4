from typing import Optional
from datetime import datetime

from pydantic import Field

from benefits_portal.schemas.base_schema import CamelModel


class NotificationCreate(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    type: str = "info"
    # No user id means the notification is shown to the whole company.
    user_id: Optional[int] = None


class Notification(CamelModel):
    id: int
    company_id: int
    user_id: Optional[int] = None
    is_global: bool
    is_read: bool
    title: str
    message: str
    type: str
    created_at: Optional[datetime] = None


class UnreadCount(CamelModel):
    count: int
