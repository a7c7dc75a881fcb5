"""
Async database setup using SQLModel with aiosqlite.
"""

import asyncio
import functools

from sqlmodel import SQLModel
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool
from typing import AsyncGenerator, Awaitable, Callable, Optional, TypeVar
from fastapi import Request
from ecotrace.models import *

from ecotrace.core.config import get_settings


def _engine_options(database_url: str) -> dict:
    """In-memory SQLite must share one connection or every session sees an empty store."""
    if database_url.startswith("sqlite") and ":memory:" in database_url:
        return {
            "poolclass": StaticPool,
            "connect_args": {"check_same_thread": False},
        }
    return {}


class Database:
    """
    Owns the engine and session factory for one record store.

    Construct, ``await init()``, use ``session()``, then ``await close()``.
    Separate instances never share records when backed by in-memory SQLite.

    Sessions carry the instance's write lock in ``session.info`` so that
    lifecycle operations on one store run one at a time.
    """

    def __init__(self, database_url: Optional[str] = None, echo: Optional[bool] = None):
        settings = get_settings()
        self.database_url = database_url or settings.database_url
        self.write_lock = asyncio.Lock()
        self.engine = create_async_engine(
            self.database_url,
            echo=settings.debug if echo is None else echo,
            **_engine_options(self.database_url),
        )
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            expire_on_commit=False,
            class_=AsyncSession,
            info={"write_lock": self.write_lock}
        )

    async def init(self) -> None:
        """Initialize database tables."""
        async with self.engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)

    async def close(self) -> None:
        """Close database connections."""
        await self.engine.dispose()

    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Dependency for getting async database session."""
        async with self.session_factory() as session:
            yield session


async def get_session(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """Dependency yielding a session from the app's Database."""
    database: Database = request.app.state.database
    async for session in database.session():
        yield session


T = TypeVar("T")


def serialized(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
    """
    Run a write handler under the write lock of its session's Database.

    The handler's first argument must be a session from ``Database.session_factory``.
    Status checks and the commit then happen without another write in between.
    """
    @functools.wraps(func)
    async def wrapper(session: AsyncSession, *args, **kwargs) -> T:
        async with session.info["write_lock"]:
            return await func(session, *args, **kwargs)
    return wrapper
