# survey_insights/database.py
import logging

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import declarative_base

from . import config

logger = logging.getLogger(__name__)

DATABASE_URL = config.DATABASE_URL

if DATABASE_URL is None:
    logger.warning(
        "DATABASE_URL not set, falling back to local SQLite database at %s",
        config.SQLITE_FALLBACK_PATH,
    )
    DATABASE_URL = f"sqlite+aiosqlite:///{config.SQLITE_FALLBACK_PATH}"

logger.debug("Using DATABASE_URL: %s", DATABASE_URL)

# echo=True logs every SQL statement SQLAlchemy emits. Debugging only.
engine = create_async_engine(DATABASE_URL, echo=config.SQL_ECHO)

AsyncSessionFactory = async_sessionmaker(
    bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False
)

Base = declarative_base()


async def get_db_session() -> AsyncSession:
    async with AsyncSessionFactory() as session:
        try:
            yield session
            await session.commit()  # commit once the request went through
        except Exception:
            await session.rollback()  # roll back on any error
            raise


async def create_db_and_tables():
    """
    Normally the schema is owned by Alembic. With DB_AUTO_CREATE set (local
    development, throwaway SQLite files) missing tables are created directly.
    """
    if not config.DB_AUTO_CREATE:
        logger.info("Skipping table creation, schema is managed by Alembic.")
        return

    # models must be imported so that Base.metadata knows every table
    from . import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database tables created (DB_AUTO_CREATE).")
