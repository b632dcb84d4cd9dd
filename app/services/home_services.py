from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional


from app import models, schemas
from app.crud import car_crud
from app.services.ai_services import vision_service
from app.services.car_listing_services import serialize_cars


class HomeService:
    """
    Landing page content: featured listings and photo search.
    """
    async def get_featured_cars(
        self,
        db: AsyncSession,
        limit: int = 3,
        current_user: Optional[models.User] = None,
    ) -> List[schemas.CarPublic]:
        """
        Newest featured listings that are still available.

        Args:
            db: Database session
            limit: Maximum number of listings
            current_user: Caller, if authenticated

        Returns:
            List of CarPublic
        """
        cars = await car_crud.get_featured_cars(db, limit)
        saved_ids = set()
        if current_user:
            saved_ids = await car_crud.get_saved_car_ids(
                db, current_user.id, [car.id for car in cars]
            )
        return serialize_cars(cars, saved_ids)


    async def process_image_search(
        self, data: bytes, content_type: Optional[str]
    ) -> schemas.ImageSearchExtraction:
        return await vision_service.extract_search_hints(data, content_type)


home_service = HomeService()
