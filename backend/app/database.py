"""
TIL Backend — Database
=======================

What:  Async engine, session factory, declarative Base, and the per-request
       session dependency.
Who:   Services receive the session from route handlers; Alembic and the
       tests read Base.metadata.

Transactions:
    One session per request. Services only flush; get_db_session commits
    when the handler returns and rolls back when anything raises.

PostgreSQL URLs get a sized pool (DB_POOL_SIZE + DB_MAX_OVERFLOW, pre-ping,
hourly recycle). SQLite URLs keep the driver's default pool.
"""

from typing import Any, AsyncGenerator, Dict

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def build_engine(database_url: str) -> AsyncEngine:
    """Engine for `database_url`; the test fixtures call this with a temp SQLite file."""
    options: Dict[str, Any] = {"echo": settings.log_level == "DEBUG"}
    if not database_url.startswith("sqlite"):
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
            pool_recycle=3600,
        )
    return create_async_engine(database_url, **options)


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    # Async sessions cannot lazy-load, so rows must stay readable after commit
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False)


engine = build_engine(settings.database_url)
async_session_factory = build_session_factory(engine)


class Base(DeclarativeBase):
    pass


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Request-scoped session.

    FastAPI caches dependencies per request, so `require_user` and the
    handler share this session and its transaction.
    """
    async with async_session_factory() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        else:
            await session.commit()


async def dispose_engine() -> None:
    await engine.dispose()
