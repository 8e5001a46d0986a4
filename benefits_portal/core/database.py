from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from benefits_portal.core.config import settings
from typing import AsyncGenerator, Optional
import asyncio
import logging
import sys
from sqlalchemy.future import select
from benefits_portal.utils.security import get_password_hash
from benefits_portal.models.base import Base

import benefits_portal.models
from benefits_portal.models.company_model import Company, CompanySettings
from benefits_portal.models.user_model import Users, UserRole

logger = logging.getLogger(__name__)


class DatabaseManager:
    def __init__(self, database_url: Optional[str] = None):
        """Initializes the database engine and session maker upon creation."""
        self.engine = create_async_engine(database_url or settings.DATABASE_URL, echo=False)
        self.async_session_maker = async_sessionmaker(
            self.engine, expire_on_commit=False, class_=AsyncSession
        )

    async def close(self):
        """Closes the database engine connections."""
        if self.engine:
            await self.engine.dispose()

    async def get_db_session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provides a database session."""
        async with self.async_session_maker() as session:
            yield session

db_manager = DatabaseManager()


async def create_super_admin(db_session: AsyncSession) -> Users:
    """Creates the initial super admin user from environment variables or defaults."""
    if settings.SUPERADMIN_USERNAME == "superadmin":
        logger.warning("SUPERADMIN_USERNAME not set. Using default: superadmin")
    if settings.SUPERADMIN_PASSWORD == "superadmin":
        logger.warning("SUPERADMIN_PASSWORD not set. Using default: superadmin")

    result = await db_session.execute(select(Users).filter(Users.username == settings.SUPERADMIN_USERNAME))
    existing = result.scalar_one_or_none()
    if existing:
        logger.info("Super admin user '%s' already exists.", settings.SUPERADMIN_USERNAME)
        return existing

    super_admin = Users(
        username=settings.SUPERADMIN_USERNAME,
        email=settings.SUPERADMIN_EMAIL,
        password=get_password_hash(settings.SUPERADMIN_PASSWORD),
        first_name="Super",
        last_name="Admin",
        role=UserRole.SUPERADMIN.value,
        is_active=True,
        company_id=None,
    )
    db_session.add(super_admin)
    await db_session.commit()
    logger.info("Super admin user '%s' created successfully.", settings.SUPERADMIN_USERNAME)
    return super_admin


async def seed_demo_company(db_session: AsyncSession) -> Company:
    """Creates the demo company with an admin, an employee and default branding."""
    result = await db_session.execute(select(Company).filter(Company.slug == "demo"))
    company = result.scalar_one_or_none()
    if company:
        logger.info("Demo company already exists (id=%s).", company.id)
        return company

    company = Company(name="Demo Company", slug="demo", status="active")
    db_session.add(company)
    await db_session.flush()

    for username, first_name, role in (
        ("admin", "Admin", UserRole.ADMIN.value),
        ("user", "Regular", UserRole.USER.value),
    ):
        db_session.add(Users(
            username=username,
            password=get_password_hash("password"),
            email=f"{username}@example.com",
            first_name=first_name,
            last_name="User",
            role=role,
            company_id=company.id,
            is_active=True,
        ))
    db_session.add(CompanySettings(company_id=company.id, name=company.name))
    await db_session.commit()
    logger.info("Demo company created (id=%s) with users 'admin' and 'user'.", company.id)
    return company


async def init_db(drop_existing: bool = False, with_demo_data: bool = False):
    """
    Creates all database tables and the initial super admin.
    """
    logger.info("Initializing database...")
    async with db_manager.engine.begin() as conn:
        logger.info("Tables known to Base.metadata: %s", list(Base.metadata.tables.keys()))
        if drop_existing:
            logger.info("Dropping all existing tables...")
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    async with db_manager.async_session_maker() as db:
        await create_super_admin(db)
        if with_demo_data:
            await seed_demo_company(db)

    logger.info("Database initialization finished successfully.")

if __name__ == "__main__":
    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(init_db(drop_existing="--drop" in sys.argv, with_demo_data="--demo" in sys.argv))
