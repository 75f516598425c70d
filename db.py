# db.py
from collections.abc import AsyncGenerator

from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    create_async_engine,
    async_sessionmaker,
)

from config import settings


def _engine_options(url: str) -> dict:
    # aiosqlite runs on a single thread per connection; pooling options
    # only matter for the PostgreSQL driver
    if url.startswith("sqlite"):
        return {}
    return {"pool_pre_ping": True, "pool_size": 10, "max_overflow": 20}


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """SQLite ignores FOREIGN KEY clauses unless asked per connection."""
    if async_engine.dialect.name != "sqlite":
        return

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


engine = create_async_engine(
    settings.DATABASE_URL,  # postgresql+asyncpg://... or sqlite+aiosqlite:///...
    echo=settings.DEBUG,
    **_engine_options(settings.DATABASE_URL),
)
enable_sqlite_foreign_keys(engine)

# Lifecycle writes commit explicitly through core.consistency; nothing is
# flushed behind the caller's back
AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request: the unit of work every lifecycle operation
    commits or rolls back as a whole.
    """
    async with AsyncSessionLocal() as session:
        yield session
