from typing import AsyncGenerator, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends, HTTPException, Query, Request, status
from fastapi.security import OAuth2PasswordBearer

from benefits_portal.core.config import settings
from benefits_portal.core.database import db_manager
from benefits_portal.models import user_model
from benefits_portal.repository.company_repository import company_repository
from benefits_portal.repository.user_repository import user_repository
from benefits_portal.utils.auth import decode_session_token

# Browsers send the session cookie; API clients may send the same token as a Bearer header.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/login", auto_error=False)

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async for session in db_manager.get_db_session():
        yield session

# --- User Authentication and Authorization Dependencies ---

async def get_current_user(
    request: Request,
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> user_model.Users:
    """
    Resolves the session (cookie first, then Bearer header) to a fresh user row.
    Role and activation changes therefore apply on the next request.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )
    raw_token = request.cookies.get(settings.SESSION_COOKIE_NAME) or token
    if not raw_token:
        raise credentials_exception

    user_id = decode_session_token(raw_token)
    if user_id is None:
        raise credentials_exception

    user = await user_repository.get_user(db, user_id=user_id)
    if user is None or not user.is_active:
        raise credentials_exception
    return user

async def get_current_admin(current_user: user_model.Users = Depends(get_current_user)) -> user_model.Users:
    """
    Dependency to ensure the user is a company admin or a super admin.
    """
    if current_user.role not in (user_model.UserRole.ADMIN.value, user_model.UserRole.SUPERADMIN.value):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )
    return current_user

async def get_current_super_admin(current_user: user_model.Users = Depends(get_current_user)) -> user_model.Users:
    """
    Dependency to ensure the user is a super admin.
    """
    if current_user.role != user_model.UserRole.SUPERADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )
    return current_user

# --- Company scope ---

def check_company_access(current_user: user_model.Users, requested_company_id: Optional[int]) -> Optional[int]:
    """
    Which company a request operates on. Returns None when a super admin did not pick one.
    Non super admins are pinned to their own company.
    """
    if current_user.role == user_model.UserRole.SUPERADMIN.value:
        return requested_company_id

    if current_user.company_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Company ID is required",
        )
    if requested_company_id is not None and requested_company_id != current_user.company_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden",
        )
    return current_user.company_id

async def resolve_company_scope(
    company_id: Optional[int] = Query(default=None, alias="companyId"),
    current_user: user_model.Users = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> int:
    """
    Dependency returning the company id every scoped read and write filters by.
    Super admins default to the first company when none is given.
    """
    scoped_company_id = check_company_access(current_user, company_id)
    if scoped_company_id is not None:
        return scoped_company_id

    first_company = await company_repository.get_first_company(db)
    if first_company is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Company ID is required",
        )
    return first_company.id
