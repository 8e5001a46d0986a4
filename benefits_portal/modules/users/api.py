from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from benefits_portal.core.dependencies import get_db, get_current_admin, resolve_company_scope
from benefits_portal.models.user_model import Users
from benefits_portal.modules.users import service as user_service
from benefits_portal.schemas import user_schema

router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


@router.get("", response_model=List[user_schema.User])
async def read_users(
    company_id: int = Depends(resolve_company_scope),
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_admin),
):
    return await user_service.get_users_service(db, company_id)


@router.post("", response_model=user_schema.User, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: user_schema.UserCreate,
    company_id: int = Depends(resolve_company_scope),
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_admin),
):
    return await user_service.create_user_service(db, current_user, company_id, user_in)


@router.get("/{user_id}", response_model=user_schema.User)
async def read_user(
    user_id: int,
    company_id: int = Depends(resolve_company_scope),
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_admin),
):
    return await user_service.get_user_service(db, user_id, company_id)


@router.patch("/{user_id}", response_model=user_schema.User)
async def update_user(
    user_id: int,
    user_in: user_schema.UserUpdate,
    company_id: int = Depends(resolve_company_scope),
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_admin),
):
    return await user_service.update_user_service(db, current_user, user_id, company_id, user_in)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int,
    company_id: int = Depends(resolve_company_scope),
    db: AsyncSession = Depends(get_db),
    current_user: Users = Depends(get_current_admin),
):
    await user_service.delete_user_service(db, current_user, user_id, company_id)
