import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from benefits_portal.main import app
from benefits_portal import models  # noqa: F401
from benefits_portal.models.base import Base
from benefits_portal.models.company_model import Company
from benefits_portal.models.user_model import Users
from benefits_portal.core.dependencies import get_current_user, get_db


@pytest.fixture
def mock_db_session():
    return AsyncMock(spec=AsyncSession)


@pytest.fixture(autouse=True)
def override_get_db(mock_db_session):
    async def _override():
        yield mock_db_session
    app.dependency_overrides[get_db] = _override
    yield
    app.dependency_overrides.pop(get_db, None)


def _client_for(user: Users):
    app.dependency_overrides[get_current_user] = lambda: user
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture
def employee_user():
    return Users(id=7, username="employee", role="user", company_id=1, is_active=True)


@pytest.fixture
def admin_user():
    return Users(id=2, username="admin", role="admin", company_id=1, is_active=True)


@pytest.fixture
def super_admin_user():
    return Users(id=3, username="superadmin", role="superadmin", company_id=None, is_active=True)


@pytest.fixture
def authenticated_client(employee_user):
    """Client signed in as a regular employee of company 1."""
    yield from _client_for(employee_user)


@pytest.fixture
def admin_client(admin_user):
    """Client signed in as an admin of company 1."""
    yield from _client_for(admin_user)


@pytest.fixture
def super_admin_client(super_admin_user):
    yield from _client_for(super_admin_user)


@pytest.fixture
def anonymous_client():
    with TestClient(app) as client:
        yield client


# --- In-memory database for repository and service tests ---

@pytest_asyncio.fixture
async def db_session():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    session_maker = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    async with session_maker() as session:
        yield session
    await engine.dispose()


@pytest_asyncio.fixture
async def two_companies(db_session):
    """Two tenants with one admin and one employee each."""
    acme = Company(name="Acme", slug="acme")
    globex = Company(name="Globex", slug="globex")
    db_session.add_all([acme, globex])
    await db_session.flush()

    users = {
        "acme_admin": Users(username="acme_admin", password="x", role="admin", company_id=acme.id, is_active=True),
        "acme_employee": Users(username="acme_employee", password="x", role="user", company_id=acme.id, is_active=True),
        "globex_admin": Users(username="globex_admin", password="x", role="admin", company_id=globex.id, is_active=True),
        "globex_employee": Users(username="globex_employee", password="x", role="user", company_id=globex.id, is_active=True),
    }
    db_session.add_all(users.values())
    await db_session.commit()
    return {"acme": acme, "globex": globex, **users}
