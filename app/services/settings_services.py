from sqlalchemy.ext.asyncio import AsyncSession
from typing import List


from app import models, schemas
from app.core.config import settings
from app.crud import dealership_crud, user_crud
from app.utils.exception_utils import BadRequestException, NotFoundException
from app.utils.logger_utils import get_logger


logger = get_logger(__name__)


DEFAULT_OPEN_TIME = "09:00"
DEFAULT_CLOSE_TIME = "18:00"


class SettingsService:
    """
    Dealership details, opening hours and user roles managed from the admin area.
    """
    def _default_hours(self) -> List[models.WorkingHour]:
        return [
            models.WorkingHour(
                day_of_week=day,
                open_time=DEFAULT_OPEN_TIME,
                close_time=DEFAULT_CLOSE_TIME,
                is_open=day != models.DayOfWeekEnum.SUNDAY,
            )
            for day in models.DayOfWeekEnum
        ]


    async def _ensure_dealership(self, db: AsyncSession) -> models.DealershipInfo:
        dealership = await dealership_crud.get_first(db)
        if not dealership:
            dealership = await dealership_crud.create_with_hours(
                db,
                models.DealershipInfo(
                    name=settings.DEALERSHIP_NAME,
                    address=settings.DEALERSHIP_ADDRESS,
                    phone=settings.DEALERSHIP_PHONE,
                    email=settings.DEALERSHIP_EMAIL,
                ),
                self._default_hours(),
            )
            logger.info("Created default dealership info")
        return dealership


    async def get_dealership_info(self, db: AsyncSession) -> schemas.DealershipPublic:
        """
        Get the dealership with its working hours, creating the default one if missing.

        Args:
            db: Database session

        Returns:
            DealershipPublic
        """
        dealership = await self._ensure_dealership(db)
        return schemas.DealershipPublic.model_validate(dealership)


    async def save_working_hours(
        self, db: AsyncSession, hours_in: List[schemas.WorkingHourIn]
    ) -> schemas.DealershipPublic:
        """
        Save the weekly schedule of the dealership.

        Args:
            db: Database session
            hours_in: One entry per day to update

        Returns:
            DealershipPublic with the saved hours
        """
        days = [hour.day_of_week for hour in hours_in]
        if len(days) != len(set(days)):
            raise BadRequestException("Each day of the week can only appear once")

        dealership = await self._ensure_dealership(db)
        dealership = await dealership_crud.save_working_hours(db, dealership, hours_in)
        logger.info(f"Working hours updated for {len(hours_in)} day(s)")

        return schemas.DealershipPublic.model_validate(dealership)


    async def get_users(self, db: AsyncSession) -> List[schemas.UserPublic]:
        users = await user_crud.get_all(db)
        return [schemas.UserPublic.model_validate(user) for user in users]


    async def update_user_role(
        self,
        db: AsyncSession,
        user_id: str,
        role_in: schemas.UserRoleUpdate,
        current_user: models.User,
    ) -> schemas.UserPublic:
        """
        Promote or demote a user.

        Args:
            db: Database session
            user_id: User to update
            role_in: New role
            current_user: Admin performing the change

        Returns:
            UserPublic with the new role
        """
        if user_id == current_user.id:
            raise BadRequestException("You cannot change your own role")

        db_user = await user_crud.get_by_id(db, user_id)
        if not db_user:
            raise NotFoundException("User not found")

        db_user = await user_crud.update_role(db, db_user, role_in.role)
        logger.info(f"User {user_id} role set to {role_in.role.value} by {current_user.id}")
        return schemas.UserPublic.model_validate(db_user)


settings_service = SettingsService()
