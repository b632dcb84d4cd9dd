from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession


from app.core.config import settings
from app.models import Base
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


engine = create_async_engine(
    settings.SQLALCHEMY_DATABASE_URL, echo=False, pool_pre_ping=True
)


AsyncSessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def connect_to_postgres():
    """
    Verifies the connection and creates missing tables.

    Args:
        None

    Returns:
        None
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database schema verified")


async def close_postgres_connection():
    """
    Disposes the SQLAlchemy engine and its connection pool.

    Args:
        None

    Returns:
        None
    """
    await engine.dispose()
    logger.info("Database engine disposed")
