from sqlalchemy import MetaData
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from clinic_records.config import Settings, get_settings

metadata = MetaData()


def build_engine(settings: Settings = None) -> AsyncEngine:
    """Create the pooled async engine described by ``settings``."""
    settings = settings or get_settings()
    return create_async_engine(settings.sqlalchemy_url, echo=settings.sql_echo)


async def create_tables(engine: AsyncEngine) -> None:
    # Register every table on the shared metadata before create_all
    import clinic_records.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(metadata.create_all)
