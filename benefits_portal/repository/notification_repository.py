from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import func, or_, update
from typing import List, Optional

from benefits_portal.models.notification_model import Notification
from benefits_portal.repository.base_repository import BaseRepository


class NotificationRepository(BaseRepository[Notification]):
    def __init__(self):
        super().__init__(Notification)

    def _visible_to(self, company_id: int, user_id: int):
        return (
            select(self.model)
            .filter(self.model.company_id == company_id)
            .filter(or_(self.model.user_id == user_id, self.model.is_global.is_(True)))
        )

    async def create_notification(self, db: AsyncSession, data: dict) -> Notification:
        return await self.create(db, data)

    async def get_user_notifications(self, db: AsyncSession, company_id: int, user_id: int) -> List[Notification]:
        result = await db.execute(
            self._visible_to(company_id, user_id).order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        return result.scalars().all()

    async def get_company_notifications(self, db: AsyncSession, company_id: int) -> List[Notification]:
        result = await db.execute(
            select(self.model)
            .filter(self.model.company_id == company_id)
            .order_by(self.model.created_at.desc(), self.model.id.desc())
        )
        return result.scalars().all()

    async def count_unread(self, db: AsyncSession, company_id: int, user_id: int) -> int:
        result = await db.execute(
            select(func.count(self.model.id))
            .filter(self.model.company_id == company_id)
            .filter(or_(self.model.user_id == user_id, self.model.is_global.is_(True)))
            .filter(self.model.is_read.is_(False))
        )
        return result.scalar_one()

    async def get_visible_notification(self, db: AsyncSession, notification_id: int, company_id: int, user_id: int) -> Optional[Notification]:
        result = await db.execute(
            self._visible_to(company_id, user_id).filter(self.model.id == notification_id)
        )
        return result.scalar_one_or_none()

    async def mark_as_read(self, db: AsyncSession, db_notification: Notification) -> Notification:
        return await self.update(db, db_notification, {"is_read": True})

    async def mark_all_as_read(self, db: AsyncSession, company_id: int, user_id: int) -> int:
        result = await db.execute(
            update(self.model)
            .where(self.model.company_id == company_id)
            .where(or_(self.model.user_id == user_id, self.model.is_global.is_(True)))
            .where(self.model.is_read.is_(False))
            .values(is_read=True)
        )
        await db.commit()
        return result.rowcount

    async def delete_notification(self, db: AsyncSession, notification_id: int, company_id: int) -> Optional[Notification]:
        return await self.delete_for_company(db, notification_id, company_id)


notification_repository = NotificationRepository()
