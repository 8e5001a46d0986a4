from contextlib import asynccontextmanager
from typing import AsyncGenerator, Callable, Optional
from sqlalchemy.ext.asyncio import AsyncSession

from benefits_portal.core.database import db_manager


class UnitOfWork:
    """
    Minimal async Unit of Work helper to centralize session lifecycle.
    Background tasks use this to get their own session with commit/rollback in one place.
    """

    def __init__(self, session_factory: Optional[Callable[[], AsyncSession]] = None):
        self._session_factory = session_factory or db_manager.async_session_maker

    @asynccontextmanager
    async def __call__(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise


@asynccontextmanager
async def atomic(session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """
    Runs a multi-row write on an existing request session as one transaction.
    Repository calls inside the block must pass commit=False.
    """
    try:
        yield session
        await session.commit()
    except Exception:
        await session.rollback()
        raise
