import uuid
from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional


from app import models, schemas
from app.crud import car_crud
from app.services.ai_services import MAX_IMAGE_SIZE, vision_service
from app.services.car_listing_services import serialize_car, serialize_cars
from app.services.storage_services import StorageService, storage_service
from app.utils.exception_utils import BadRequestException, NotFoundException
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


class InventoryService:
    """
    Admin management of listings and their images.
    """
    async def add_car(
        self,
        db: AsyncSession,
        car_in: schemas.CarCreate,
        images: List[UploadFile],
    ) -> schemas.CarPublic:
        """
        Create a listing and upload its images.

        Files that are not images are skipped. The listing is only created
        when at least one image was stored.

        Args:
            db: Database session
            car_in: Listing fields
            images: Uploaded image files

        Returns:
            CarPublic of the new listing
        """
        car_id = str(uuid.uuid4())
        image_urls: List[str] = []

        try:
            for index, image in enumerate(images or []):
                if not StorageService.image_extension(image.content_type):
                    logger.warning(f"Skipping non-image upload {image.filename}")
                    continue

                data = await image.read()
                if not data:
                    continue
                if len(data) > MAX_IMAGE_SIZE:
                    raise BadRequestException("Image file size must be less than 5 MB")

                image_urls.append(
                    await storage_service.upload_car_image(
                        car_id, data, image.content_type, index
                    )
                )
        except Exception:
            # Images stored before the failure
            await storage_service.delete_car_images(image_urls)
            raise

        if not image_urls:
            raise BadRequestException("No valid images were uploaded")

        try:
            car = await car_crud.create_car(
                db,
                models.Car(id=car_id, images=image_urls, **car_in.model_dump()),
            )
        except Exception:
            await storage_service.delete_car_images(image_urls)
            raise

        logger.info(f"Car {car.id} created with {len(image_urls)} image(s)")
        return serialize_car(car)


    async def get_admin_cars(
        self, db: AsyncSession, search: Optional[str] = None
    ) -> List[schemas.CarPublic]:
        cars = await car_crud.get_admin_cars(db, search)
        return serialize_cars(cars)


    async def update_car_status(
        self, db: AsyncSession, car_id: str, update_in: schemas.CarStatusUpdate
    ) -> schemas.CarPublic:
        """
        Change the status and/or featured flag of a listing.

        Args:
            db: Database session
            car_id: Listing ID
            update_in: Fields to change

        Returns:
            CarPublic of the updated listing
        """
        car = await car_crud.get_by_id(db, car_id)
        if not car:
            raise NotFoundException("Car not found")

        car = await car_crud.update_car(
            db, car, update_in.model_dump(exclude_none=True)
        )
        logger.info(f"Car {car_id} updated: {update_in.model_dump(exclude_none=True)}")
        return serialize_car(car)


    async def delete_car(self, db: AsyncSession, car_id: str) -> None:
        """
        Delete a listing, its wishlist entries, its bookings and its images.

        Args:
            db: Database session
            car_id: Listing ID

        Returns:
            None
        """
        car = await car_crud.get_by_id(db, car_id)
        if not car:
            raise NotFoundException("Car not found")

        image_urls = list(car.images or [])
        await car_crud.delete_car(db, car)
        await storage_service.delete_car_images(image_urls)
        logger.info(f"Car {car_id} deleted")


    async def process_car_image_with_ai(
        self, data: bytes, content_type: Optional[str]
    ) -> schemas.CarImageExtraction:
        return await vision_service.extract_car_details(data, content_type)


inventory_service = InventoryService()
