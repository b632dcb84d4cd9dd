import logging
from sqlalchemy.ext.asyncio import AsyncSession


from app import models, schemas
from app.core.config import settings
from app.auth.security import get_password_hash
from app.crud import user_crud
from app.services.settings_services import settings_service


logger = logging.getLogger(__name__)


async def seed_super_admin(db: AsyncSession) -> None:
    """
    Creates the super admin account from settings if it does not exist.

    Args:
        db (AsyncSession): Active DB session.

    Returns:
        None
    """
    if await user_crud.get_by_email(db, settings.SUPER_ADMIN_EMAIL):
        return

    logger.info("Seeding super admin...")
    try:
        await user_crud.create_user(
            db,
            user_in=schemas.UserCreate(
                name=settings.SUPER_ADMIN_NAME,
                email=settings.SUPER_ADMIN_EMAIL,
                password=settings.SUPER_ADMIN_PASSWORD,
            ),
            hashed_password=get_password_hash(settings.SUPER_ADMIN_PASSWORD),
            role=models.RoleName.ADMIN,
        )
    except Exception as e:
        await db.rollback()
        logger.error(f"Error creating super admin: {e}")


async def seed_data(db: AsyncSession) -> None:
    """
    Seeds the super admin and the default dealership with its working hours.

    Args:
        db (AsyncSession): Active DB session.

    Returns:
        None
    """
    await seed_super_admin(db)
    await settings_service.get_dealership_info(db)
    logger.info("Seeding complete.")
