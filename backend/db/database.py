"""Async engine and session factory for the relay and business tables.

SQLite (aiosqlite) is the default backing store; a PostgreSQL URL
(asyncpg) switches on connection pooling. Both dialects support the
``ON CONFLICT`` upsert the relay stores rely on.
"""

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker

from app.config import get_settings

settings = get_settings()


def create_db_engine():
    """Build the engine for ``settings.DATABASE_URL``.

    SQLite writers wait up to SQLITE_BUSY_TIMEOUT for a locked file
    instead of failing straight away when two relay writes overlap.
    """
    kwargs = dict(echo=settings.SQLALCHEMY_ECHO)
    if settings.DATABASE_URL.startswith("sqlite"):
        kwargs["connect_args"] = {"timeout": settings.SQLITE_BUSY_TIMEOUT}
    else:
        kwargs.update(
            pool_pre_ping=True,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
        )
    return create_async_engine(settings.DATABASE_URL, **kwargs)


def create_session_factory(engine):
    # Rows stay readable after commit; handlers return them once the request commits
    return sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
        autocommit=False,
    )


# Module-level so tests can swap both for an in-memory engine
engine = create_db_engine()
AsyncSessionLocal = create_session_factory(engine)


async def init_db():
    """Create the businesses and relay tables if they do not exist yet."""
    from db.base import Base
    import db.models  # noqa: F401  (registers models on Base.metadata)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db():
    await engine.dispose()
