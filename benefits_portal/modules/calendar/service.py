from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import datetime
import logging

from benefits_portal.core.exceptions import NotFoundError, ValidationError
from benefits_portal.models.calendar_model import CalendarEvent, color_for_event_type
from benefits_portal.repository.calendar_repository import calendar_event_repository
from benefits_portal.schemas import calendar_schema

logger = logging.getLogger(__name__)


async def get_events_service(db: AsyncSession, company_id: int, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[CalendarEvent]:
    if start is not None and end is not None and start > end:
        raise ValidationError("start must not be after end")
    return await calendar_event_repository.get_events(db, company_id, start=start, end=end)


async def get_event_service(db: AsyncSession, event_id: int, company_id: int) -> CalendarEvent:
    event = await calendar_event_repository.get_event(db, event_id, company_id)
    if event is None:
        raise NotFoundError("Event")
    return event


async def create_event_service(db: AsyncSession, company_id: int, event_in: calendar_schema.CalendarEventCreate) -> CalendarEvent:
    data = event_in.model_dump()
    data["company_id"] = company_id
    data["color"] = event_in.color or color_for_event_type(event_in.event_type)
    event = await calendar_event_repository.create(db, data)
    logger.info(f"Calendar event {event.id} created for company {company_id}")
    return event


async def update_event_service(db: AsyncSession, event_id: int, company_id: int, event_in: calendar_schema.CalendarEventUpdate) -> CalendarEvent:
    event = await get_event_service(db, event_id, company_id)
    update_data = event_in.model_dump(exclude_unset=True)
    if update_data.get("event_type") and not update_data.get("color"):
        update_data["color"] = color_for_event_type(update_data["event_type"])
    elif "color" in update_data and not update_data["color"]:
        update_data.pop("color")
    return await calendar_event_repository.update(db, event, update_data)


async def delete_event_service(db: AsyncSession, event_id: int, company_id: int) -> None:
    event = await calendar_event_repository.delete_event(db, event_id, company_id)
    if event is None:
        raise NotFoundError("Event")
