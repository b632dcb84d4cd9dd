from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func, delete
from datetime import datetime, timezone
from typing import Optional


from app import models


class AuthCRUD:
    """
    Class for managing user authentication sessions and revoked tokens.
    """
    async def create_session(
        self,
        db: AsyncSession,
        jti: str,
        user_id: str,
        refresh_token: str,
        expires_at: datetime,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> models.UserSession:
        """
        Create a new user session with the provided JWT identifier.

        Args:
            db: Database session
            jti: JWT unique identifier
            user_id: User ID associated with the session
            refresh_token: Refresh token string
            expires_at: Session expiration timestamp
            device_info: Optional user agent string
            ip_address: Optional IP address of the client

        Returns:
            Newly created UserSession object
        """
        db_session = models.UserSession(
            jti=jti,
            user_id=user_id,
            refresh_token=refresh_token,
            expires_at=expires_at,
            device_info=device_info or "Unknown",
            ip_address=ip_address or "Unknown",
        )
        db.add(db_session)
        await db.commit()
        await db.refresh(db_session)
        return db_session


    async def get_session_by_jti(
        self, db: AsyncSession, jti: str
    ) -> Optional[models.UserSession]:
        """
        Retrieve a user session by its JWT identifier.

        Args:
            db: Database session
            jti: JWT unique identifier

        Returns:
            UserSession if found, None otherwise
        """
        return await db.get(models.UserSession, jti)


    async def count_active_sessions(self, db: AsyncSession, user_id: str) -> int:
        """
        Count unexpired sessions of a user.

        Args:
            db: Database session
            user_id: User ID to count sessions for

        Returns:
            Number of active sessions
        """
        result = await db.execute(
            select(func.count(models.UserSession.jti)).where(
                models.UserSession.user_id == user_id,
                models.UserSession.expires_at > datetime.now(timezone.utc),
            )
        )
        return result.scalar() or 0


    async def is_token_revoked(self, db: AsyncSession, jti: str) -> bool:
        """
        Check if a JWT identifier is in the revoked tokens list.

        Args:
            db: Database session
            jti: JWT unique identifier to check

        Returns:
            True if token is revoked, False otherwise
        """
        return await db.get(models.RevokedToken, jti) is not None


    async def revoke_session(self, db: AsyncSession, jti: str) -> bool:
        """
        Move a session to the revoked list.

        Args:
            db: Database session
            jti: JWT unique identifier of the session

        Returns:
            True if the session existed, False otherwise
        """
        db_session = await self.get_session_by_jti(db, jti)
        if not db_session:
            return False

        db.add(models.RevokedToken(jti=jti, expires_at=db_session.expires_at))
        await db.delete(db_session)
        await db.commit()
        return True


    async def prune_expired(self, db: AsyncSession) -> None:
        """
        Remove expired sessions and revoked-token entries.

        Args:
            db: Database session
        """
        now = datetime.now(timezone.utc)
        await db.execute(
            delete(models.RevokedToken).where(models.RevokedToken.expires_at <= now)
        )
        await db.execute(
            delete(models.UserSession).where(models.UserSession.expires_at <= now)
        )
        await db.commit()


auth_crud = AuthCRUD()
