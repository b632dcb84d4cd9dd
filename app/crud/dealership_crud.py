from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import List, Optional


from app import models, schemas


class DealershipCRUD:
    """
    Class for managing dealership details and working hours.
    """
    async def get_first(self, db: AsyncSession) -> Optional[models.DealershipInfo]:
        """
        Get the dealership record.

        Args:
            db: Database session

        Returns:
            DealershipInfo if one exists, None otherwise
        """
        result = await db.execute(
            select(models.DealershipInfo).order_by(models.DealershipInfo.id).limit(1)
        )
        return result.scalar_one_or_none()


    async def create_with_hours(
        self,
        db: AsyncSession,
        dealership: models.DealershipInfo,
        hours: List[models.WorkingHour],
    ) -> models.DealershipInfo:
        """
        Persist a dealership together with its weekly schedule.

        Args:
            db: Database session
            dealership: Dealership to insert
            hours: Working hours to attach

        Returns:
            Created dealership with working hours loaded
        """
        dealership.working_hours = hours
        db.add(dealership)
        await db.commit()
        await db.refresh(dealership)
        await db.refresh(dealership, attribute_names=["working_hours"])
        return dealership


    async def save_working_hours(
        self,
        db: AsyncSession,
        dealership: models.DealershipInfo,
        hours_in: List[schemas.WorkingHourIn],
    ) -> models.DealershipInfo:
        """
        Update the schedule day by day, creating days that are missing.

        Args:
            db: Database session
            dealership: Dealership to update
            hours_in: New working hours

        Returns:
            Dealership with refreshed working hours
        """
        existing = {hour.day_of_week: hour for hour in dealership.working_hours}

        for hour_in in hours_in:
            db_hour = existing.get(hour_in.day_of_week)
            if db_hour is None:
                db_hour = models.WorkingHour(
                    dealership_id=dealership.id, day_of_week=hour_in.day_of_week
                )
                db.add(db_hour)
                existing[hour_in.day_of_week] = db_hour
            db_hour.open_time = hour_in.open_time
            db_hour.close_time = hour_in.close_time
            db_hour.is_open = hour_in.is_open

        await db.commit()
        await db.refresh(dealership, attribute_names=["working_hours"])
        return dealership


dealership_crud = DealershipCRUD()
