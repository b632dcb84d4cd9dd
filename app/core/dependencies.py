from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncSession
from azure.storage.blob.aio import ContainerClient


from app.database import session_sql, blob_storage


async def get_sql_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Provide an async SQLAlchemy session.

    Args:
        None

    Yields:
        An instance of AsyncSession.
    """
    async with session_sql.AsyncSessionLocal() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


async def get_container_client(container: str) -> ContainerClient:
    """
    Provide an Azure Blob Storage container client.

    Args:
        container (str): The name of the container.

    Returns:
        An instance of ContainerClient.
    """
    return blob_storage.get_blob_service_client().get_container_client(container)
