import contextlib
from typing import Any, AsyncIterator

from fastapi import Request
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from likeable.config import settings


class DatabaseSessionManager:
    def __init__(self, host: str, engine_kwargs: dict[str, Any] | None = None):
        self._engine: AsyncEngine | None = create_async_engine(host, **(engine_kwargs or {}))
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = async_sessionmaker(
            autocommit=False,
            autoflush=False,
            bind=self._engine,
            expire_on_commit=False,
        )

    async def close(self):
        if self._engine is None:
            raise Exception("DatabaseSessionManager is not initialized")
        await self._engine.dispose()

        self._engine = None
        self._sessionmaker = None

    @contextlib.asynccontextmanager
    async def session(self) -> AsyncIterator[AsyncSession]:
        if self._sessionmaker is None:
            raise Exception("DatabaseSessionManager is not initialized")

        session = self._sessionmaker()
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


def create_sessionmanager(url: str | None = None) -> DatabaseSessionManager:
    return DatabaseSessionManager(
        url or settings.DATABASE_URL,
        {"echo": settings.ECHO_SQL, "pool_pre_ping": True},
    )


async def get_db_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Yield a session from the manager the plugin attached to the host app"""
    sessionmanager: DatabaseSessionManager = request.app.state.likeable.sessionmanager
    async with sessionmanager.session() as session:
        yield session
