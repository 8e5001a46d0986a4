from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
import logging

from benefits_portal.core.exceptions import AuthorizationError, ConflictError, NotFoundError, ValidationError
from benefits_portal.models.user_model import Users, UserRole
from benefits_portal.repository.company_repository import company_repository
from benefits_portal.repository.user_repository import user_repository
from benefits_portal.schemas import user_schema
from benefits_portal.utils.security import get_password_hash

logger = logging.getLogger(__name__)


def _check_role_assignment(current_user: Users, role: str) -> None:
    if role == UserRole.SUPERADMIN.value and not current_user.is_super_admin:
        raise AuthorizationError("Only a super admin can grant the superadmin role")


async def get_users_service(db: AsyncSession, company_id: int) -> List[Users]:
    return await user_repository.get_users_by_company(db, company_id)


async def get_user_service(db: AsyncSession, user_id: int, company_id: int) -> Users:
    user = await user_repository.get_user_for_company(db, user_id, company_id)
    if user is None:
        raise NotFoundError("User")
    return user


async def create_user_service(db: AsyncSession, current_user: Users, company_id: int, user_in: user_schema.UserCreate) -> Users:
    _check_role_assignment(current_user, user_in.role)
    if await user_repository.get_user_by_username(db, user_in.username):
        raise ConflictError("Username already exists")

    if user_in.role == UserRole.SUPERADMIN.value:
        target_company_id = None
    else:
        target_company_id = company_id
        if await company_repository.get_company(db, target_company_id) is None:
            raise NotFoundError("Company")

    data = user_in.model_dump(exclude={"password", "company_id"})
    data.update(password=get_password_hash(user_in.password), company_id=target_company_id)
    user = await user_repository.create_user(db, data)
    logger.info(f"User '{user.username}' ({user.role}) created by '{current_user.username}'")
    return user


async def update_user_service(db: AsyncSession, current_user: Users, user_id: int, company_id: int, user_in: user_schema.UserUpdate) -> Users:
    user = await get_user_service(db, user_id, company_id)
    update_data = user_in.model_dump(exclude_unset=True)
    if "role" in update_data:
        _check_role_assignment(current_user, update_data["role"])
    if user.id == current_user.id and update_data.get("is_active") is False:
        raise ValidationError("You cannot deactivate your own account")
    if update_data.get("password"):
        update_data["password"] = get_password_hash(update_data["password"])
    else:
        update_data.pop("password", None)
    return await user_repository.update_user(db, user, update_data)


async def delete_user_service(db: AsyncSession, current_user: Users, user_id: int, company_id: int) -> None:
    if user_id == current_user.id:
        raise ValidationError("You cannot delete your own account")
    user = await get_user_service(db, user_id, company_id)
    if user.is_super_admin and not current_user.is_super_admin:
        raise AuthorizationError("Only a super admin can delete a super admin")
    await user_repository.delete_user(db, user)
    logger.info(f"User {user_id} deleted by '{current_user.username}'")
