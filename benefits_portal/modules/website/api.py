from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Dict

from benefits_portal.core.dependencies import get_db, get_current_user, resolve_company_scope
from benefits_portal.models.user_model import Users
from benefits_portal.modules.website import service as website_service

router = APIRouter(
    tags=["Website Content"],
)


@router.get("/website-content")
async def read_website_content(
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await website_service.get_website_content_service(db, company_id)


@router.get("/benefit-details/{benefit_id}")
async def read_benefit_detail(
    benefit_id: str,
    company_id: int = Depends(resolve_company_scope),
    current_user: Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Dict[str, Any]:
    return await website_service.get_benefit_detail_service(db, company_id, benefit_id)
