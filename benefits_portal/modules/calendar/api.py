from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from datetime import datetime

from benefits_portal.core.dependencies import get_db, get_current_user, get_current_admin, resolve_company_scope
from benefits_portal.models.user_model import Users
from benefits_portal.modules.calendar import service as calendar_service
from benefits_portal.schemas import calendar_schema
from benefits_portal.schemas.base_schema import MessageResponse

router = APIRouter(
    prefix="/events",
    tags=["Calendar"],
)


@router.get("", response_model=List[calendar_schema.CalendarEvent])
async def read_events(
    start: Optional[datetime] = Query(default=None),
    end: Optional[datetime] = Query(default=None),
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await calendar_service.get_events_service(db, company_id, start=start, end=end)


@router.post("", response_model=calendar_schema.CalendarEvent, status_code=status.HTTP_201_CREATED)
async def create_event(
    event_in: calendar_schema.CalendarEventCreate,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await calendar_service.create_event_service(db, company_id, event_in)


@router.patch("/{event_id}", response_model=calendar_schema.CalendarEvent)
async def update_event(
    event_id: int,
    event_in: calendar_schema.CalendarEventUpdate,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    return await calendar_service.update_event_service(db, event_id, company_id, event_in)


@router.delete("/{event_id}", response_model=MessageResponse)
async def delete_event(
    event_id: int,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_admin),
    db: AsyncSession = Depends(get_db),
):
    await calendar_service.delete_event_service(db, event_id, company_id)
    return {"message": "Event deleted successfully"}
