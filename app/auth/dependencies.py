from typing import Optional
from fastapi import Depends
from fastapi.security import SecurityScopes, OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession


from app.core.config import settings
from app.core.dependencies import get_sql_session
from app.utils.exception_utils import CredentialsException, ForbiddenException
from app.crud import auth_crud, user_crud
from app.auth import security
from app.auth.permissions import scopes_for_role
from app import models


oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_STR}/auth/login", scopes={}
)
optional_oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_STR}/auth/login", scopes={}, auto_error=False
)


async def _resolve_user(db: AsyncSession, token: str) -> models.User:
    """
    Decode an access token and load its user.

    Args:
        db (AsyncSession): Database session.
        token (str): JWT access token.

    Returns:
        models.User: The user the token was issued to.
    """
    payload = security.decode_token(
        token=token, secret_key=settings.ACCESS_TOKEN_SECRET_KEY
    )
    if payload.type != "access":
        raise CredentialsException(detail="Invalid token type")

    # Logout revokes the session jti shared by access and refresh tokens
    if await auth_crud.is_token_revoked(db, jti=payload.jti):
        raise CredentialsException(detail="Token has been revoked")

    user = await user_crud.get_by_id(db, user_id=payload.sub)
    if not user:
        raise CredentialsException(detail="User not found")
    return user


async def get_current_user(
    security_scopes: SecurityScopes,
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_sql_session),
) -> models.User:
    """
    Retrieve the currently authenticated user based on the provided JWT access token.

    Args:
        security_scopes (SecurityScopes): Required scopes for route.
        token (str): JWT access token.
        db (AsyncSession): Database session.

    Returns:
        models.User: Authenticated user object.
    """
    user = await _resolve_user(db, token)

    # Enforce role permissions
    if security_scopes.scopes:
        granted = scopes_for_role(user.role)
        for scope in security_scopes.scopes:
            if scope not in granted:
                raise ForbiddenException(detail="Not enough permissions")

    return user


async def get_optional_user(
    token: Optional[str] = Depends(optional_oauth2_scheme),
    db: AsyncSession = Depends(get_sql_session),
) -> Optional[models.User]:
    """
    Retrieve the caller when a valid access token is present, otherwise None.

    Public listing pages use this to personalise results (wishlist flags,
    existing test drives) without requiring a login.

    Args:
        token (Optional[str]): JWT access token, if any.
        db (AsyncSession): Database session.

    Returns:
        Optional[models.User]: Authenticated user or None for anonymous callers.
    """
    if not token:
        return None
    try:
        return await _resolve_user(db, token)
    except CredentialsException:
        return None
