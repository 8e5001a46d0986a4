from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from benefits_portal.core.exceptions import ConflictError, NotFoundError
from benefits_portal.core.uow import atomic
from benefits_portal.models.company_model import Company
from benefits_portal.repository.company_repository import company_repository, company_settings_repository
from benefits_portal.schemas import company_schema

logger = logging.getLogger(__name__)


async def create_company_service(db: AsyncSession, company_in: company_schema.CompanyCreate) -> Company:
    if await company_repository.get_company_by_slug(db, company_in.slug):
        raise ConflictError(f"Company slug '{company_in.slug}' is already in use")
    company = await company_repository.create_company(db, company_in)
    logger.info(f"Company '{company.name}' created with id {company.id}")
    return company


async def get_companies_service(db: AsyncSession) -> List[Company]:
    return await company_repository.get_companies(db)


async def get_company_service(db: AsyncSession, company_id: int) -> Company:
    company = await company_repository.get_company(db, company_id)
    if company is None:
        raise NotFoundError("Company")
    return company


async def update_company_service(db: AsyncSession, company_id: int, company_in: company_schema.CompanyUpdate) -> Company:
    company = await get_company_service(db, company_id)
    if company_in.slug and company_in.slug != company.slug:
        if await company_repository.get_company_by_slug(db, company_in.slug):
            raise ConflictError(f"Company slug '{company_in.slug}' is already in use")
    return await company_repository.update_company(db, company, company_in)


async def delete_company_service(db: AsyncSession, company_id: int) -> None:
    """Deletes the company together with all of its tenant data in one transaction."""
    await get_company_service(db, company_id)
    async with atomic(db):
        await company_repository.delete_company_cascade(db, company_id)
    logger.warning(f"Company {company_id} and all of its data were deleted")


# --- Company settings ---

async def get_company_settings_service(db: AsyncSession, company_id: int) -> company_schema.CompanySettings:
    """Stored settings, or defaults derived from the company when none were saved yet."""
    db_settings = await company_settings_repository.get_settings(db, company_id)
    if db_settings is not None:
        return company_schema.CompanySettings.model_validate(db_settings)

    company = await get_company_service(db, company_id)
    return company_schema.CompanySettings(company_id=company.id, name=company.name, address=company.address)


async def update_company_settings_service(db: AsyncSession, company_id: int, settings_in: company_schema.CompanySettingsUpdate) -> company_schema.CompanySettings:
    company = await get_company_service(db, company_id)
    db_settings = await company_settings_repository.upsert_settings(db, company_id, settings_in, default_name=company.name)
    return company_schema.CompanySettings.model_validate(db_settings)
