from azure.storage.blob import ContentSettings
from datetime import datetime, timezone
from typing import List, Optional
from urllib.parse import urlparse, unquote


from app.core.config import settings
from app.core.dependencies import get_container_client
from app.utils.exception_utils import ServerErrorException
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


IMAGE_EXTENSIONS = {
    "jpeg": "jpeg",
    "jpg": "jpeg",
    "pjpeg": "jpeg",
    "png": "png",
    "webp": "webp",
    "gif": "gif",
    "avif": "avif",
    "heic": "heic",
}


class StorageService:
    """
    Stores listing images in Azure Blob Storage.
    """

    @staticmethod
    def image_extension(content_type: Optional[str]) -> Optional[str]:
        """
        File extension for an image MIME type.

        Args:
            content_type: MIME type of the upload

        Returns:
            Extension such as "png", or None when the upload is not a raster image
        """
        content_type = (content_type or "").lower()
        if not content_type.startswith("image/"):
            return None
        subtype = content_type.split("/", 1)[1].split(";")[0].strip()
        return IMAGE_EXTENSIONS.get(subtype)


    def _blob_name_from_url(self, url: str) -> Optional[str]:
        path = unquote(urlparse(url).path).lstrip("/")
        prefix = f"{settings.CAR_IMAGES_CONTAINER_NAME}/"
        if prefix not in path:
            return None
        return path.split(prefix, 1)[1]


    async def upload_car_image(
        self, car_id: str, data: bytes, content_type: str, index: int
    ) -> str:
        """
        Upload one listing image and return its public URL.

        Args:
            car_id: Listing ID, used as the blob folder
            data: Raw image bytes
            content_type: MIME type of the image
            index: Position of the image in the upload batch

        Returns:
            URL of the uploaded blob
        """
        extension = self.image_extension(content_type) or "jpeg"
        timestamp = int(datetime.now(timezone.utc).timestamp() * 1000)
        blob_name = f"cars/{car_id}/image-{timestamp}-{index}.{extension}"

        try:
            container_client = await get_container_client(
                settings.CAR_IMAGES_CONTAINER_NAME
            )
            blob_client = container_client.get_blob_client(blob_name)
            await blob_client.upload_blob(
                data,
                overwrite=True,
                content_settings=ContentSettings(content_type=content_type),
            )
            return blob_client.url

        except Exception as e:
            logger.error(f"Error uploading car image {blob_name}: {e}")
            raise ServerErrorException("Failed to upload car image")


    async def delete_car_images(self, image_urls: List[str]) -> None:
        """
        Delete listing images, logging blobs that could not be removed.

        Args:
            image_urls: Public URLs previously returned by upload_car_image

        Returns:
            None
        """
        if not image_urls:
            return

        container_client = await get_container_client(settings.CAR_IMAGES_CONTAINER_NAME)
        for url in image_urls:
            blob_name = self._blob_name_from_url(url)
            if not blob_name:
                logger.warning(f"Skipping image outside the car images container: {url}")
                continue
            try:
                await container_client.get_blob_client(blob_name).delete_blob()
            except Exception as e:
                logger.warning(f"Failed to delete blob {url}: {e}")


storage_service = StorageService()
