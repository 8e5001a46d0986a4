from datetime import datetime
from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index
from benefits_portal.models.base import Base

EVENT_TYPE_COLORS = {
    "email": "blue",
    "survey": "green",
    "meeting": "purple",
    "deadline": "amber",
}
DEFAULT_EVENT_COLOR = "slate"


def color_for_event_type(event_type) -> str:
    return EVENT_TYPE_COLORS.get((event_type or "").lower(), DEFAULT_EVENT_COLOR)


class CalendarEvent(Base):
    __tablename__ = "Calendar_events"
    __table_args__ = (
        Index("ix_calendar_events_company_date", "company_id", "event_date"),
    )

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("Company.id"), nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    event_date = Column(DateTime, nullable=False)
    event_type = Column(String(50), nullable=False)
    color = Column(String(50), nullable=False, default=DEFAULT_EVENT_COLOR)
    created_at = Column(DateTime, default=datetime.utcnow)
