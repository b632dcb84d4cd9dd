from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from datetime import datetime, timedelta, timezone
from typing import Optional
import uuid


from app import models, schemas
from app.crud import user_crud, auth_crud
from app.utils.exception_utils import (
    DuplicateEntryException,
    CredentialsException,
    SessionLimitException,
)
from app.utils.logger_utils import get_logger
from app.utils.time_utils import as_utc
from app.auth import security
from app.core.config import settings


logger = get_logger(__name__)


class AuthService:
    """
    Handles registration, login, refresh-token rotation and logout.
    """
    async def _open_session(
        self,
        db: AsyncSession,
        user: models.User,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> schemas.Token:
        """
        Issue an access/refresh token pair that share one session jti.

        Args:
            db: DB session
            user: Authenticated user
            device_info: Client user agent
            ip_address: Client address

        Returns:
            Token schema containing access & refresh tokens
        """
        jti = str(uuid.uuid4())
        refresh_token_expires_at = datetime.now(timezone.utc) + timedelta(
            hours=settings.REFRESH_TOKEN_EXPIRE_HOURS
        )

        access_token = security.create_access_token(subject=user.id, jti=jti)
        refresh_token = security.create_refresh_token(subject=user.id, jti=jti)

        await auth_crud.create_session(
            db,
            jti=jti,
            user_id=user.id,
            refresh_token=refresh_token,
            expires_at=refresh_token_expires_at,
            device_info=device_info,
            ip_address=ip_address,
        )

        return schemas.Token(
            access_token=access_token, refresh_token=refresh_token, role=user.role.value
        )


    async def register_with_login(
        self,
        db: AsyncSession,
        user_in: schemas.UserCreate,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> schemas.Token:
        """
        Register a new customer and log them in by issuing tokens.

        Args:
            db: DB session
            user_in: UserCreate request payload
            device_info: Client user agent
            ip_address: Client address

        Returns:
            Token schema containing access & refresh tokens
        """
        if await user_crud.get_by_email(db, user_in.email):
            raise DuplicateEntryException("Email already registered")

        user = await user_crud.create_user(
            db,
            user_in=user_in,
            hashed_password=security.get_password_hash(user_in.password),
        )
        logger.info(f"Registered user {user.id}")

        return await self._open_session(db, user, device_info, ip_address)


    async def login(
        self,
        db: AsyncSession,
        form_data: OAuth2PasswordRequestForm,
        device_info: Optional[str] = None,
        ip_address: Optional[str] = None,
    ) -> schemas.Token:
        """
        Authenticate user, create session, issue access and refresh tokens.

        Args:
            db: DB session
            form_data: Login credentials, the username field carries the email
            device_info: Client user agent
            ip_address: Client address

        Returns:
            Token schema containing access & refresh tokens
        """
        user = await user_crud.get_by_email(db, form_data.username)
        if not user or not security.verify_password(form_data.password, user.password):
            raise CredentialsException("Incorrect email or password")

        active_sessions = await auth_crud.count_active_sessions(db, user.id)
        if active_sessions >= settings.MAX_SESSIONS_PER_USER:
            raise SessionLimitException()

        return await self._open_session(db, user, device_info, ip_address)


    def _decode_refresh(self, refresh_token_str: str) -> schemas.TokenPayload:
        payload = security.decode_token(
            token=refresh_token_str, secret_key=settings.REFRESH_TOKEN_SECRET_KEY
        )
        if payload.type != "refresh":
            raise CredentialsException("Invalid token type")
        return payload


    async def logout(self, db: AsyncSession, refresh_token_str: str) -> None:
        """
        Log out user by revoking the refresh token session.

        Args:
            db: DB session
            refresh_token_str: Refresh token string

        Returns:
            None
        """
        payload = self._decode_refresh(refresh_token_str)

        if not await auth_crud.revoke_session(db, jti=payload.jti):
            raise CredentialsException("Invalid or already revoked token")
        logger.info(f"Session {payload.jti} revoked for user {payload.sub}")


    async def refresh(self, db: AsyncSession, refresh_token_str: str) -> schemas.Token:
        """
        Refresh access token using a valid refresh token.

        Args:
            db: DB session
            refresh_token_str: Refresh token

        Returns:
            Token schema with new access token and same refresh token
        """
        payload = self._decode_refresh(refresh_token_str)

        if await auth_crud.is_token_revoked(db, payload.jti):
            raise CredentialsException("Refresh token has been revoked")

        db_session = await auth_crud.get_session_by_jti(db, payload.jti)
        if not db_session:
            raise CredentialsException("Invalid or expired session")

        if as_utc(db_session.expires_at) < datetime.now(timezone.utc):
            raise CredentialsException("Refresh token expired")

        user = await user_crud.get_by_id(db, db_session.user_id)
        if not user:
            raise CredentialsException("User not found")

        new_access_token = security.create_access_token(
            subject=user.id, jti=payload.jti
        )

        return schemas.Token(
            access_token=new_access_token,
            refresh_token=refresh_token_str,
            role=user.role.value,
        )


auth_service = AuthService()
