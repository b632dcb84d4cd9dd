from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, or_, delete
from typing import Dict, List, Optional, Set, Tuple


from app import models, schemas


class CarCRUD:
    """
    Class for managing listing and wishlist database operations.
    """
    async def get_by_id(self, db: AsyncSession, car_id: str) -> Optional[models.Car]:
        """
        Get a listing by ID.

        Args:
            db: Database session
            car_id: Listing ID

        Returns:
            Car if found, None otherwise
        """
        return await db.get(models.Car, car_id)


    async def create_car(self, db: AsyncSession, car_in_db: models.Car) -> models.Car:
        db.add(car_in_db)
        await db.commit()
        await db.refresh(car_in_db)
        return car_in_db


    async def update_car(
        self, db: AsyncSession, db_car: models.Car, update_data: Dict
    ) -> models.Car:
        """
        Apply a partial update to a listing.

        Args:
            db: Database session
            db_car: Listing to update
            update_data: Column values to set

        Returns:
            Updated listing
        """
        for field, value in update_data.items():
            setattr(db_car, field, value)
        await db.commit()
        await db.refresh(db_car)
        return db_car


    async def delete_car(self, db: AsyncSession, db_car: models.Car) -> None:
        await db.delete(db_car)
        await db.commit()


    async def get_distinct_values(
        self, db: AsyncSession, column
    ) -> List[str]:
        """
        Distinct values of a column among available listings, sorted ascending.

        Args:
            db: Database session
            column: Car column to read

        Returns:
            Sorted list of distinct values
        """
        result = await db.execute(
            select(column)
            .where(models.Car.status == models.CarStatusEnum.AVAILABLE)
            .distinct()
            .order_by(column.asc())
        )
        return [value for value in result.scalars().all() if value]


    async def get_price_bounds(
        self, db: AsyncSession
    ) -> Tuple[Optional[float], Optional[float]]:
        """
        Minimum and maximum price among available listings.

        Args:
            db: Database session

        Returns:
            Tuple of (min, max), both None when nothing is available
        """
        result = await db.execute(
            select(func.min(models.Car.price), func.max(models.Car.price)).where(
                models.Car.status == models.CarStatusEnum.AVAILABLE
            )
        )
        low, high = result.one()
        return (
            float(low) if low is not None else None,
            float(high) if high is not None else None,
        )


    def _apply_public_filters(self, query, params: schemas.CarFilterParams):
        """
        Apply the public search filters to a listing query.

        Args:
            query: SQLAlchemy select query
            params: Filter parameters

        Returns:
            Filtered query
        """
        query = query.where(models.Car.status == models.CarStatusEnum.AVAILABLE)

        if params.search:
            query = query.where(
                or_(
                    models.Car.make.icontains(params.search, autoescape=True),
                    models.Car.model.icontains(params.search, autoescape=True),
                    models.Car.description.icontains(params.search, autoescape=True),
                )
            )
        if params.make:
            query = query.where(func.lower(models.Car.make) == params.make.lower())
        if params.body_type:
            query = query.where(
                func.lower(models.Car.body_type) == params.body_type.lower()
            )
        if params.fuel_type:
            query = query.where(
                func.lower(models.Car.fuel_type) == params.fuel_type.lower()
            )
        if params.transmission:
            query = query.where(
                func.lower(models.Car.transmission) == params.transmission.lower()
            )

        query = query.where(models.Car.price >= (params.min_price or 0))
        # A zero or missing max means no upper bound
        if params.max_price:
            query = query.where(models.Car.price <= params.max_price)

        return query


    def _sort_order(self, sort_by: str) -> list:
        if sort_by == models.CarSortEnum.PRICE_ASC.value:
            return [models.Car.price.asc(), models.Car.created_at.desc()]
        if sort_by == models.CarSortEnum.PRICE_DESC.value:
            return [models.Car.price.desc(), models.Car.created_at.desc()]
        return [models.Car.created_at.desc()]


    async def get_cars_paginated(
        self, db: AsyncSession, params: schemas.CarFilterParams
    ) -> Tuple[List[models.Car], int]:
        """
        Get a page of available listings matching the filters.

        Args:
            db: Database session
            params: Filter, sort and page parameters

        Returns:
            Tuple of car list and total count of matches
        """
        filtered_query = self._apply_public_filters(select(models.Car), params)

        count_query = select(func.count()).select_from(filtered_query.subquery())
        total_result = await db.execute(count_query)
        total = total_result.scalar_one()

        skip = (params.page - 1) * params.limit
        items_query = (
            filtered_query.order_by(*self._sort_order(params.sort_by))
            .offset(skip)
            .limit(params.limit)
        )
        items_result = await db.execute(items_query)
        return items_result.scalars().all(), total


    async def get_featured_cars(
        self, db: AsyncSession, limit: int = 3
    ) -> List[models.Car]:
        """
        Newest featured listings that are still available.

        Args:
            db: Database session
            limit: Maximum number of listings

        Returns:
            List of featured cars
        """
        result = await db.execute(
            select(models.Car)
            .where(
                models.Car.featured.is_(True),
                models.Car.status == models.CarStatusEnum.AVAILABLE,
            )
            .order_by(models.Car.created_at.desc())
            .limit(limit)
        )
        return result.scalars().all()


    async def get_admin_cars(
        self, db: AsyncSession, search: Optional[str] = None
    ) -> List[models.Car]:
        """
        All listings regardless of status, newest first.

        Args:
            db: Database session
            search: Optional text matched against make, model and color

        Returns:
            List of cars
        """
        query = select(models.Car)
        if search:
            query = query.where(
                or_(
                    models.Car.make.icontains(search, autoescape=True),
                    models.Car.model.icontains(search, autoescape=True),
                    models.Car.color.icontains(search, autoescape=True),
                )
            )
        result = await db.execute(query.order_by(models.Car.created_at.desc()))
        return result.scalars().all()


    async def count_by_status(self, db: AsyncSession) -> Dict[models.CarStatusEnum, int]:
        """
        Number of listings per status.

        Args:
            db: Database session

        Returns:
            Mapping of status to count, statuses without listings omitted
        """
        result = await db.execute(
            select(models.Car.status, func.count(models.Car.id)).group_by(
                models.Car.status
            )
        )
        return {status: count for status, count in result.all()}


    async def count_featured(self, db: AsyncSession) -> int:
        result = await db.execute(
            select(func.count(models.Car.id)).where(models.Car.featured.is_(True))
        )
        return result.scalar() or 0


    async def get_saved_car(
        self, db: AsyncSession, user_id: str, car_id: str
    ) -> Optional[models.UserSavedCar]:
        """
        Get the wishlist entry of a user for a listing.

        Args:
            db: Database session
            user_id: User ID
            car_id: Listing ID

        Returns:
            UserSavedCar if saved, None otherwise
        """
        result = await db.execute(
            select(models.UserSavedCar).where(
                models.UserSavedCar.user_id == user_id,
                models.UserSavedCar.car_id == car_id,
            )
        )
        return result.scalar_one_or_none()


    async def add_saved_car(
        self, db: AsyncSession, user_id: str, car_id: str
    ) -> models.UserSavedCar:
        saved = models.UserSavedCar(user_id=user_id, car_id=car_id)
        db.add(saved)
        await db.commit()
        await db.refresh(saved)
        return saved


    async def remove_saved_car(
        self, db: AsyncSession, user_id: str, car_id: str
    ) -> None:
        await db.execute(
            delete(models.UserSavedCar).where(
                models.UserSavedCar.user_id == user_id,
                models.UserSavedCar.car_id == car_id,
            )
        )
        await db.commit()


    async def get_saved_cars(
        self, db: AsyncSession, user_id: str
    ) -> List[models.Car]:
        """
        Listings on a user's wishlist, most recently saved first.

        Args:
            db: Database session
            user_id: User ID

        Returns:
            List of saved cars
        """
        result = await db.execute(
            select(models.Car)
            .join(models.UserSavedCar, models.UserSavedCar.car_id == models.Car.id)
            .where(models.UserSavedCar.user_id == user_id)
            .order_by(models.UserSavedCar.saved_at.desc())
        )
        return result.scalars().all()


    async def get_saved_car_ids(
        self, db: AsyncSession, user_id: str, car_ids: Optional[List[str]] = None
    ) -> Set[str]:
        """
        IDs of listings a user has saved.

        Args:
            db: Database session
            user_id: User ID
            car_ids: Restrict the lookup to these listings

        Returns:
            Set of saved listing IDs
        """
        query = select(models.UserSavedCar.car_id).where(
            models.UserSavedCar.user_id == user_id
        )
        if car_ids is not None:
            if not car_ids:
                return set()
            query = query.where(models.UserSavedCar.car_id.in_(car_ids))
        result = await db.execute(query)
        return set(result.scalars().all())


car_crud = CarCRUD()
