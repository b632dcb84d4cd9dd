import math
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Iterable, List, Optional, Set


from app import models, schemas
from app.crud import car_crud, test_drive_crud
from app.services.finance_services import finance_service
from app.services.settings_services import settings_service
from app.utils.exception_utils import NotFoundException
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


DEFAULT_PRICE_RANGE = (0.0, 1_000_000.0)


def serialize_car(car: models.Car, wishlisted: bool = False) -> schemas.CarPublic:
    """
    Convert a listing row into its public schema.

    Args:
        car: Listing row
        wishlisted: Whether the caller saved this listing

    Returns:
        CarPublic
    """
    car_public = schemas.CarPublic.model_validate(car)
    car_public.wishlisted = wishlisted
    return car_public


def serialize_cars(
    cars: Iterable[models.Car], saved_ids: Optional[Set[str]] = None
) -> List[schemas.CarPublic]:
    saved_ids = saved_ids or set()
    return [serialize_car(car, car.id in saved_ids) for car in cars]


class CarListingService:
    """
    Public listing search, listing details and the wishlist.
    """
    async def get_car_filters(self, db: AsyncSession) -> schemas.CarFiltersResponse:
        """
        Values available for the search sidebar.

        Args:
            db: Database session

        Returns:
            CarFiltersResponse with distinct values and the price range
        """
        low, high = await car_crud.get_price_bounds(db)

        return schemas.CarFiltersResponse(
            makes=await car_crud.get_distinct_values(db, models.Car.make),
            body_types=await car_crud.get_distinct_values(db, models.Car.body_type),
            fuel_types=await car_crud.get_distinct_values(db, models.Car.fuel_type),
            transmissions=await car_crud.get_distinct_values(db, models.Car.transmission),
            price_range=schemas.PriceRange(
                min=low if low is not None else DEFAULT_PRICE_RANGE[0],
                max=high if high is not None else DEFAULT_PRICE_RANGE[1],
            ),
        )


    async def get_cars(
        self,
        db: AsyncSession,
        params: schemas.CarFilterParams,
        current_user: Optional[models.User] = None,
    ) -> schemas.PaginatedCarResponse:
        """
        Search available listings.

        Args:
            db: Database session
            params: Filter, sort and page parameters
            current_user: Caller, if authenticated

        Returns:
            PaginatedCarResponse
        """
        cars, total = await car_crud.get_cars_paginated(db, params)

        saved_ids: Set[str] = set()
        if current_user:
            saved_ids = await car_crud.get_saved_car_ids(
                db, current_user.id, [car.id for car in cars]
            )

        return schemas.PaginatedCarResponse(
            data=serialize_cars(cars, saved_ids),
            pagination=schemas.PaginationMeta(
                total=total,
                page=params.page,
                limit=params.limit,
                pages=math.ceil(total / params.limit),
            ),
        )


    async def get_car_by_id(
        self,
        db: AsyncSession,
        car_id: str,
        current_user: Optional[models.User] = None,
    ) -> schemas.CarDetails:
        """
        Listing details with wishlist flag and test drive context.

        Args:
            db: Database session
            car_id: Listing ID
            current_user: Caller, if authenticated

        Returns:
            CarDetails
        """
        car = await car_crud.get_by_id(db, car_id)
        if not car:
            raise NotFoundException("Car not found")

        wishlisted = False
        user_test_drive = None
        if current_user:
            wishlisted = (
                await car_crud.get_saved_car(db, current_user.id, car_id)
            ) is not None
            booking = await test_drive_crud.get_latest_user_booking_for_car(
                db, current_user.id, car_id
            )
            if booking:
                user_test_drive = schemas.UserTestDriveSummary.model_validate(booking)

        dealership = await settings_service.get_dealership_info(db)

        return schemas.CarDetails(
            **serialize_car(car, wishlisted).model_dump(),
            test_drive_info=schemas.TestDriveInfo(
                user_test_drive=user_test_drive, dealership=dealership
            ),
        )


    async def calculate_car_emi(
        self,
        db: AsyncSession,
        car_id: str,
        down_payment: Optional[float] = None,
        interest_rate: float = 5.0,
        tenure_years: int = 1,
    ) -> schemas.EmiResult:
        car = await car_crud.get_by_id(db, car_id)
        if not car:
            raise NotFoundException("Car not found")

        return finance_service.calculate_emi(
            schemas.EmiRequest(
                price=float(car.price),
                down_payment=down_payment,
                interest_rate=interest_rate,
                tenure_years=tenure_years,
            )
        )


    async def toggle_saved_car(
        self, db: AsyncSession, car_id: str, current_user: models.User
    ) -> schemas.SavedCarToggleResponse:
        """
        Add a listing to the wishlist, or remove it if already saved.

        Args:
            db: Database session
            car_id: Listing ID
            current_user: Caller

        Returns:
            SavedCarToggleResponse
        """
        car = await car_crud.get_by_id(db, car_id)
        if not car:
            raise NotFoundException("Car not found")

        if await car_crud.get_saved_car(db, current_user.id, car_id):
            await car_crud.remove_saved_car(db, current_user.id, car_id)
            return schemas.SavedCarToggleResponse(
                saved=False, message="Car removed from favorites"
            )

        await car_crud.add_saved_car(db, current_user.id, car_id)
        return schemas.SavedCarToggleResponse(saved=True, message="Car added to favorites")


    async def get_saved_cars(
        self, db: AsyncSession, current_user: models.User
    ) -> List[schemas.CarPublic]:
        cars = await car_crud.get_saved_cars(db, current_user.id)
        return [serialize_car(car, wishlisted=True) for car in cars]


car_listing_service = CarListingService()
