from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List, Optional
from datetime import datetime

from benefits_portal.models.calendar_model import CalendarEvent
from benefits_portal.repository.base_repository import BaseRepository


class CalendarEventRepository(BaseRepository[CalendarEvent]):
    def __init__(self):
        super().__init__(CalendarEvent)

    async def get_events(self, db: AsyncSession, company_id: int, start: Optional[datetime] = None, end: Optional[datetime] = None) -> List[CalendarEvent]:
        query = select(self.model).filter(self.model.company_id == company_id)
        if start is not None:
            query = query.filter(self.model.event_date >= start)
        if end is not None:
            query = query.filter(self.model.event_date <= end)
        result = await db.execute(query.order_by(self.model.event_date.asc(), self.model.id.asc()))
        return result.scalars().all()

    async def get_event(self, db: AsyncSession, event_id: int, company_id: int) -> Optional[CalendarEvent]:
        return await self.get_for_company(db, event_id, company_id)

    async def delete_event(self, db: AsyncSession, event_id: int, company_id: int) -> Optional[CalendarEvent]:
        return await self.delete_for_company(db, event_id, company_id)


calendar_event_repository = CalendarEventRepository()
