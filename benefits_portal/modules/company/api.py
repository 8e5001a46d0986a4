from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from benefits_portal.core.dependencies import get_db, get_current_admin, get_current_super_admin, resolve_company_scope, get_current_user
from benefits_portal.models.user_model import Users
from benefits_portal.modules.company import service as company_service
from benefits_portal.schemas import company_schema

router = APIRouter(
    prefix="/companies",
    tags=["Company"],
)

settings_router = APIRouter(
    prefix="/company-settings",
    tags=["Company Settings"],
)


@router.get("", response_model=List[company_schema.Company])
async def read_companies(
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_super_admin),
):
    return await company_service.get_companies_service(db)


@router.post("", response_model=company_schema.Company, status_code=status.HTTP_201_CREATED)
async def create_company(
    company_in: company_schema.CompanyCreate,
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_super_admin),
):
    return await company_service.create_company_service(db, company_in)


@router.get("/{company_id}", response_model=company_schema.Company)
async def read_company(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_super_admin),
):
    return await company_service.get_company_service(db, company_id)


@router.patch("/{company_id}", response_model=company_schema.Company)
async def update_company(
    company_id: int,
    company_in: company_schema.CompanyUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_super_admin),
):
    return await company_service.update_company_service(db, company_id, company_in)


@router.delete("/{company_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_company(
    company_id: int,
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_super_admin),
):
    await company_service.delete_company_service(db, company_id)


@settings_router.get("", response_model=company_schema.CompanySettings)
async def read_company_settings(
    company_id: int = Depends(resolve_company_scope),
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_user),
):
    return await company_service.get_company_settings_service(db, company_id)


@settings_router.patch("", response_model=company_schema.CompanySettings)
async def update_company_settings(
    settings_in: company_schema.CompanySettingsUpdate,
    company_id: int = Depends(resolve_company_scope),
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_admin),
):
    return await company_service.update_company_settings_service(db, company_id, settings_in)
