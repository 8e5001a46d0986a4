from typing import Literal
from datetime import datetime

from pydantic import Field

from benefits_portal.schemas.base_schema import CamelModel


class ChatMessageCreate(CamelModel):
    content: str = Field(min_length=1, max_length=4000)


class ChatMessage(CamelModel):
    id: int
    company_id: int
    user_id: int
    role: Literal["user", "assistant"]
    content: str
    timestamp: datetime
