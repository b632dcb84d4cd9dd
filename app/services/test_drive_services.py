from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional


from app import models, schemas
from app.crud import car_crud, test_drive_crud
from app.utils.exception_utils import (
    BadRequestException,
    ConflictException,
    ForbiddenException,
    NotFoundException,
)
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


class TestDriveService:
    """
    Booking, listing and status changes of test drives.
    """
    async def book_test_drive(
        self,
        db: AsyncSession,
        booking_in: schemas.TestDriveCreate,
        current_user: models.User,
    ) -> schemas.TestDrivePublic:
        """
        Reserve a test drive slot for the caller.

        Args:
            db: Database session
            booking_in: Requested car, day and slot
            current_user: Caller

        Returns:
            TestDrivePublic of the new PENDING booking
        """
        car = await car_crud.get_by_id(db, booking_in.car_id)
        if not car or car.status != models.CarStatusEnum.AVAILABLE:
            raise BadRequestException("Car not available for test drive")

        conflict = await test_drive_crud.find_conflict(
            db,
            car_id=booking_in.car_id,
            booking_date=booking_in.booking_date,
            start_time=booking_in.start_time,
        )
        if conflict:
            raise ConflictException(
                "This time slot is already booked. Please select another time."
            )

        booking = await test_drive_crud.create_booking(
            db,
            models.TestDriveBooking(
                car_id=booking_in.car_id,
                user_id=current_user.id,
                booking_date=booking_in.booking_date,
                start_time=booking_in.start_time,
                end_time=booking_in.end_time,
                notes=booking_in.notes,
                status=models.TestDriveStatusEnum.PENDING,
            ),
        )
        logger.info(
            f"Test drive {booking.id} booked for car {booking.car_id} on "
            f"{booking.booking_date} {booking.start_time} by {current_user.id}"
        )
        return schemas.TestDrivePublic.model_validate(booking)


    async def get_user_test_drives(
        self, db: AsyncSession, current_user: models.User
    ) -> List[schemas.TestDrivePublic]:
        bookings = await test_drive_crud.get_user_bookings(db, current_user.id)
        return [schemas.TestDrivePublic.model_validate(booking) for booking in bookings]


    async def cancel_test_drive(
        self, db: AsyncSession, booking_id: str, current_user: models.User
    ) -> schemas.TestDrivePublic:
        """
        Cancel a booking on behalf of its owner or an admin.

        Args:
            db: Database session
            booking_id: Booking ID
            current_user: Caller

        Returns:
            TestDrivePublic of the cancelled booking
        """
        booking = await test_drive_crud.get_by_id(db, booking_id)
        if not booking:
            raise NotFoundException("Test drive not found")

        if (
            booking.user_id != current_user.id
            and current_user.role != models.RoleName.ADMIN
        ):
            raise ForbiddenException("Unauthorized to cancel this test drive")

        if booking.status == models.TestDriveStatusEnum.CANCELLED:
            raise BadRequestException("Test drive is already cancelled")
        if booking.status == models.TestDriveStatusEnum.COMPLETED:
            raise BadRequestException("Cannot cancel a completed test drive")

        booking = await test_drive_crud.update_status(
            db, booking, models.TestDriveStatusEnum.CANCELLED
        )
        logger.info(f"Test drive {booking_id} cancelled by {current_user.id}")
        return schemas.TestDrivePublic.model_validate(booking)


    async def get_admin_test_drives(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        status: Optional[str] = None,
    ) -> List[schemas.AdminTestDrivePublic]:
        """
        All bookings for the admin board.

        Args:
            db: Database session
            search: Text matched against car make/model and customer name/email
            status: Status filter

        Returns:
            List of AdminTestDrivePublic
        """
        status_filter = self._parse_status(status) if status else None
        bookings = await test_drive_crud.get_admin_bookings(
            db, search=search, status=status_filter
        )
        return [schemas.AdminTestDrivePublic.model_validate(booking) for booking in bookings]


    def _parse_status(self, status: str) -> models.TestDriveStatusEnum:
        try:
            return models.TestDriveStatusEnum(status.upper())
        except ValueError:
            raise BadRequestException("Invalid status")


    async def update_test_drive_status(
        self, db: AsyncSession, booking_id: str, status: str
    ) -> schemas.AdminTestDrivePublic:
        """
        Move a booking to any status.

        Args:
            db: Database session
            booking_id: Booking ID
            status: New status name

        Returns:
            AdminTestDrivePublic of the updated booking
        """
        new_status = self._parse_status(status)

        booking = await test_drive_crud.get_by_id(db, booking_id)
        if not booking:
            raise NotFoundException("Test drive not found")

        booking = await test_drive_crud.update_status(db, booking, new_status)
        logger.info(f"Test drive {booking_id} status set to {new_status.value}")
        return schemas.AdminTestDrivePublic.model_validate(booking)


test_drive_service = TestDriveService()
