from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from typing import List, Optional

from benefits_portal.models.user_model import Users
from benefits_portal.repository.base_repository import BaseRepository


class UserRepository(BaseRepository[Users]):
    def __init__(self):
        super().__init__(Users)

    async def get_user(self, db: AsyncSession, user_id: int) -> Optional[Users]:
        return await self.get(db, user_id)

    async def get_user_by_username(self, db: AsyncSession, username: str) -> Optional[Users]:
        result = await db.execute(select(self.model).filter(self.model.username == username))
        return result.scalar_one_or_none()

    async def get_users_by_company(self, db: AsyncSession, company_id: int) -> List[Users]:
        result = await db.execute(
            select(self.model)
            .filter(self.model.company_id == company_id)
            .order_by(self.model.id.asc())
        )
        return result.scalars().all()

    async def get_user_for_company(self, db: AsyncSession, user_id: int, company_id: int) -> Optional[Users]:
        return await self.get_for_company(db, user_id, company_id)

    async def create_user(self, db: AsyncSession, user_data: dict) -> Users:
        return await self.create(db, user_data)

    async def update_user(self, db: AsyncSession, db_user: Users, update_data: dict) -> Users:
        return await self.update(db, db_user, update_data)

    async def delete_user(self, db: AsyncSession, db_user: Users) -> None:
        await db.delete(db_user)
        await db.commit()


user_repository = UserRepository()
