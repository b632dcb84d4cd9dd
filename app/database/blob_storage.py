from azure.storage.blob.aio import BlobServiceClient
from azure.core.exceptions import ResourceExistsError


from app.core.config import settings


blob_service_client = BlobServiceClient.from_connection_string(
    settings.AZURE_STORAGE_CONNECTION_STRING
)


def get_blob_service_client() -> BlobServiceClient:
    """
    Returns the shared Azure Blob Service client.

    Args:
        None

    Returns:
        BlobServiceClient: The Azure Blob Service client.
    """
    return blob_service_client


async def close_blob_service_client():
    """
    Closes the Azure Blob Service client connection.

    Args:
        None

    Returns:
        None
    """
    await blob_service_client.close()


async def verify_containers() -> None:
    """
    Ensure the car images container exists, creating it with public blob access if missing.

    Args:
        None

    Returns:
        None
    """
    container_client = blob_service_client.get_container_client(
        settings.CAR_IMAGES_CONTAINER_NAME
    )
    try:
        await container_client.create_container(public_access="blob")

    except ResourceExistsError:
        return

    except Exception as exc:
        raise RuntimeError(
            f"Failed to ensure Azure Blob container '{settings.CAR_IMAGES_CONTAINER_NAME}'. "
            f"Application startup aborted."
        ) from exc
