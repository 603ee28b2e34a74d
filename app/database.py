import logging
import sys

from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker, declarative_base
from app.config import settings

logger = logging.getLogger("journal.database")


def require_database_url(url: str | None) -> str:
    if not url:
        logger.critical("DATABASE_URL is not defined in the environment or .env file.")
        sys.exit(1)
    return url


DATABASE_URL = require_database_url(settings.DATABASE_URL)

engine = create_async_engine(DATABASE_URL, echo=settings.SQL_ECHO)
AsyncSessionLocal = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
Base = declarative_base()

async def get_db():
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()

async def create_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("DB_READY url=%s", engine.url.render_as_string(hide_password=True))


async def drop_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
