from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict, Optional, Tuple

from benefits_portal.core.exceptions import NotFoundError
from benefits_portal.modules.ai.ai_text_service import ai_text_service
from benefits_portal.repository.company_repository import company_repository, company_settings_repository


async def _company_context(db: AsyncSession, company_id: int) -> Tuple[str, Optional[str]]:
    """Display name and website prompt of a company."""
    company = await company_repository.get_company(db, company_id)
    if company is None:
        raise NotFoundError("Company")
    company_settings = await company_settings_repository.get_settings(db, company_id)
    if company_settings is None:
        return company.name, None
    return company_settings.name or company.name, company_settings.website_prompt


async def get_website_content_service(db: AsyncSession, company_id: int) -> Dict[str, Any]:
    company_name, website_prompt = await _company_context(db, company_id)
    return await ai_text_service.generate_website_content(website_prompt, company_name)


async def get_benefit_detail_service(db: AsyncSession, company_id: int, benefit_id: str) -> Dict[str, Any]:
    company_name, website_prompt = await _company_context(db, company_id)
    return await ai_text_service.generate_benefit_detail(benefit_id.lower(), company_name, website_prompt)
