from sqlalchemy.ext.asyncio import AsyncSession


from app import models, schemas
from app.crud import car_crud, test_drive_crud


class DashboardService:
    """
    Inventory and test drive statistics for the admin overview.
    """
    async def get_dashboard_data(self, db: AsyncSession) -> schemas.DashboardResponse:
        """
        Collect car and test drive counters.

        Conversion rate is the share of completed test drives that ended
        with the car sold, in percent.

        Args:
            db: Database session

        Returns:
            DashboardResponse
        """
        car_counts = await car_crud.count_by_status(db)
        drive_counts = await test_drive_crud.count_by_status(db)

        completed = drive_counts.get(models.TestDriveStatusEnum.COMPLETED, 0)
        sold_after_drive = await test_drive_crud.count_sold_cars_with_completed_drive(db)
        conversion_rate = (
            round(sold_after_drive / completed * 100, 2) if completed > 0 else 0.0
        )

        return schemas.DashboardResponse(
            cars=schemas.CarStats(
                total=sum(car_counts.values()),
                available=car_counts.get(models.CarStatusEnum.AVAILABLE, 0),
                sold=car_counts.get(models.CarStatusEnum.SOLD, 0),
                unavailable=car_counts.get(models.CarStatusEnum.UNAVAILABLE, 0),
                featured=await car_crud.count_featured(db),
            ),
            test_drives=schemas.TestDriveStats(
                total=sum(drive_counts.values()),
                pending=drive_counts.get(models.TestDriveStatusEnum.PENDING, 0),
                confirmed=drive_counts.get(models.TestDriveStatusEnum.CONFIRMED, 0),
                completed=completed,
                cancelled=drive_counts.get(models.TestDriveStatusEnum.CANCELLED, 0),
                no_show=drive_counts.get(models.TestDriveStatusEnum.NO_SHOW, 0),
                conversion_rate=conversion_rate,
            ),
        )


dashboard_service = DashboardService()
