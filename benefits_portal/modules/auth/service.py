from sqlalchemy.ext.asyncio import AsyncSession
import logging

from benefits_portal.core.exceptions import AuthenticationError, ConflictError, ValidationError
from benefits_portal.models import user_model
from benefits_portal.repository.company_repository import company_repository
from benefits_portal.repository.user_repository import user_repository
from benefits_portal.schemas import user_schema
from benefits_portal.utils.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid username or password"


async def authenticate_user(db: AsyncSession, username: str, password: str) -> user_model.Users:
    """
    Checks credentials. Unknown usernames and wrong passwords produce the same error.
    """
    user = await user_repository.get_user_by_username(db, username=username)
    if user is None or not verify_password(password, user.password):
        logger.info(f"Failed login attempt for username '{username}'")
        raise AuthenticationError(INVALID_CREDENTIALS)
    if not user.is_active:
        raise AuthenticationError("Account is deactivated")
    return user


async def register_user(db: AsyncSession, user_data: user_schema.UserRegistration) -> user_model.Users:
    """
    Self-registration of an employee into an existing, active company.
    """
    if await user_repository.get_user_by_username(db, username=user_data.username):
        raise ConflictError("Username already exists")

    company = await company_repository.get_company(db, user_data.company_id)
    if company is None or company.status != "active":
        raise ValidationError("Company not found or inactive")

    data = user_data.model_dump(exclude={"password"})
    data.update(
        password=get_password_hash(user_data.password),
        role=user_model.UserRole.USER.value,
        is_active=True,
    )
    user = await user_repository.create_user(db, data)
    logger.info(f"User '{user.username}' registered in company {company.id}")
    return user
