# Database connection setup
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from .config import Settings, get_settings
from .core.models.base import BaseModel

# Get settings
settings = get_settings()


def _engine_options(cfg: Settings) -> dict:
    """Pool options only apply to server databases, not SQLite."""
    options = {"echo": cfg.database_echo}
    if not cfg.database_url.startswith("sqlite"):
        options.update(
            pool_size=cfg.database_pool_size,
            pool_timeout=cfg.database_pool_timeout,
            pool_pre_ping=True,
        )
    return options


# Create async engine using settings
engine = create_async_engine(settings.database_url, **_engine_options(settings))

# Session factory
AsyncSessionLocal = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


async def get_db_session():
    """Get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def create_tables():
    """Create all tables."""
    # models must be imported so their tables are registered on the metadata
    from .core import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)


async def dispose_engine():
    """Release pooled connections on shutdown."""
    await engine.dispose()
