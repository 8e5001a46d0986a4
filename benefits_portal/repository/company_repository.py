from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy import delete
from typing import List, Optional
from datetime import datetime

from benefits_portal.models import (
    Company,
    CompanySettings,
    Users,
    Documents,
    SurveyTemplate,
    SurveyQuestion,
    TemplateQuestion,
    SurveyResponse,
    CalendarEvent,
    ChatMessage,
    Notification,
)
from benefits_portal.schemas import company_schema
from benefits_portal.repository.base_repository import BaseRepository


class CompanyRepository(BaseRepository[Company]):
    def __init__(self):
        super().__init__(Company)

    async def create_company(self, db: AsyncSession, company: company_schema.CompanyCreate) -> Company:
        return await self.create(db, company)

    async def get_company(self, db: AsyncSession, company_id: int) -> Optional[Company]:
        return await self.get(db, company_id)

    async def get_company_by_slug(self, db: AsyncSession, slug: str) -> Optional[Company]:
        result = await db.execute(select(self.model).filter(self.model.slug == slug))
        return result.scalar_one_or_none()

    async def get_first_company(self, db: AsyncSession) -> Optional[Company]:
        result = await db.execute(select(self.model).order_by(self.model.id.asc()).limit(1))
        return result.scalar_one_or_none()

    async def get_companies(self, db: AsyncSession) -> List[Company]:
        result = await db.execute(select(self.model).order_by(self.model.id.asc()))
        return result.scalars().all()

    async def update_company(self, db: AsyncSession, db_company: Company, company_in: company_schema.CompanyUpdate) -> Company:
        update_data = company_in.model_dump(exclude_unset=True)
        update_data["updated_at"] = datetime.utcnow()
        return await self.update(db, db_company, update_data)

    async def delete_company_cascade(self, db: AsyncSession, company_id: int) -> None:
        """Removes a company and every tenant row it owns. Caller commits."""
        template_ids = select(SurveyTemplate.id).filter(SurveyTemplate.company_id == company_id)
        await db.execute(delete(TemplateQuestion).where(TemplateQuestion.template_id.in_(template_ids)))
        for model in (
            SurveyResponse,
            SurveyTemplate,
            SurveyQuestion,
            Documents,
            CalendarEvent,
            ChatMessage,
            Notification,
            CompanySettings,
            Users,
        ):
            await db.execute(delete(model).where(model.company_id == company_id))
        await db.execute(delete(Company).where(Company.id == company_id))


class CompanySettingsRepository(BaseRepository[CompanySettings]):
    def __init__(self):
        super().__init__(CompanySettings)

    async def get_settings(self, db: AsyncSession, company_id: int) -> Optional[CompanySettings]:
        result = await db.execute(select(self.model).filter(self.model.company_id == company_id))
        return result.scalar_one_or_none()

    async def upsert_settings(self, db: AsyncSession, company_id: int, settings_in: company_schema.CompanySettingsUpdate, default_name: Optional[str] = None) -> CompanySettings:
        """Creates the settings row on first write, then applies the partial update."""
        update_data = settings_in.model_dump(exclude_unset=True)
        update_data["updated_at"] = datetime.utcnow()
        db_settings = await self.get_settings(db, company_id)
        if db_settings is None:
            data = {"company_id": company_id, "name": default_name}
            data.update(update_data)
            return await self.create(db, data)
        return await self.update(db, db_settings, update_data)


company_repository = CompanyRepository()
company_settings_repository = CompanySettingsRepository()
