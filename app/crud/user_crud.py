from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from typing import List, Optional

from app import models, schemas


class UserCRUD:
    """
    Class for managing user CRUD operations.
    """

    async def get_by_id(self, db: AsyncSession, user_id: str) -> Optional[models.User]:
        """
        Fetch a user by ID.

        Args:
            db: Async database session
            user_id: User ID

        Returns:
            User object if found, else None
        """
        return await db.get(models.User, user_id)


    async def get_by_email(self, db: AsyncSession, email: str) -> Optional[models.User]:
        """
        Fetch user by email, ignoring case.

        Args:
            db: Async DB session
            email: Email address

        Returns:
            User if exists, else None
        """
        result = await db.execute(
            select(models.User).where(func.lower(models.User.email) == email.lower())
        )
        return result.scalar_one_or_none()


    async def create_user(
        self,
        db: AsyncSession,
        user_in: schemas.UserCreate,
        hashed_password: str,
        role: models.RoleName = models.RoleName.USER,
    ) -> models.User:
        """
        Persist a new user.

        Args:
            db: Async DB session
            user_in: Registration payload
            hashed_password: bcrypt hash of the password
            role: Role to assign

        Returns:
            The created user
        """
        db_user = models.User(
            name=user_in.name,
            email=user_in.email.lower(),
            phone=user_in.phone,
            password=hashed_password,
            role=role,
        )
        db.add(db_user)
        await db.commit()
        await db.refresh(db_user)
        return db_user


    async def get_all(self, db: AsyncSession) -> List[models.User]:
        """
        List every user, newest first.

        Args:
            db: Async DB session

        Returns:
            List of users
        """
        result = await db.execute(
            select(models.User).order_by(models.User.created_at.desc())
        )
        return result.scalars().all()


    async def update_role(
        self, db: AsyncSession, db_user: models.User, role: models.RoleName
    ) -> models.User:
        """
        Change the role of a user.

        Args:
            db: Async DB session
            db_user: User to update
            role: New role

        Returns:
            The updated user
        """
        db_user.role = role
        await db.commit()
        await db.refresh(db_user)
        return db_user


user_crud = UserCRUD()
