from fastapi import APIRouter, Depends, Request, Response
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession


from app import models, schemas
from app.auth.dependencies import get_current_user
from app.core.dependencies import get_sql_session
from app.core.config import settings
from app.services import auth_service
from app.utils.exception_utils import CredentialsException


router = APIRouter()


def _set_refresh_cookie(response: Response, refresh_token: str) -> None:
    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=False,
        samesite="lax",
        max_age=settings.REFRESH_TOKEN_EXPIRE_HOURS * 60 * 60,
    )


def _client_info(request: Request):
    return (
        request.headers.get("user-agent"),
        request.client.host if request.client else None,
    )


@router.post("/register", response_model=schemas.TokenResponse)
async def register(
    user_in: schemas.UserCreate,
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_sql_session),
):
    """
    Register a new user in the system.

    Args:
        user_in: Name, email, password and optional phone
        request: HTTP request, used for session device info
        response: HTTP response object for setting cookies
        db: Database session dependency

    Returns:
        TokenResponse containing access token and user role
    """
    device_info, ip_address = _client_info(request)
    result = await auth_service.register_with_login(db, user_in, device_info, ip_address)

    _set_refresh_cookie(response, result.refresh_token)
    return schemas.TokenResponse(access_token=result.access_token, role=result.role)


@router.post("/login", response_model=schemas.TokenResponse)
async def login(
    request: Request,
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_sql_session),
):
    """
    Authenticate user and issue access and refresh tokens.

    Args:
        request: HTTP request, used for session device info
        response: HTTP response object for setting cookies
        form_data: OAuth2 form data, username carries the email
        db: Database session dependency

    Returns:
        TokenResponse containing access token and user role
    """
    device_info, ip_address = _client_info(request)
    result = await auth_service.login(db, form_data, device_info, ip_address)

    _set_refresh_cookie(response, result.refresh_token)
    return schemas.TokenResponse(access_token=result.access_token, role=result.role)


@router.post("/logout", response_model=schemas.Msg)
async def logout(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_sql_session),
):
    """
    Logout user by revoking their refresh token.

    Args:
        request: HTTP request object containing cookies
        response: HTTP response object for clearing cookies
        db: Database session dependency

    Returns:
        Success message confirming logout
    """
    refresh_token = request.cookies.get("refresh_token")
    if not refresh_token:
        raise CredentialsException("No refresh token found")

    await auth_service.logout(db, refresh_token)

    response.delete_cookie(key="refresh_token", secure=False, samesite="lax")
    return schemas.Msg(message="Logged out successfully")


@router.post("/refresh", response_model=schemas.TokenResponse)
async def refresh(
    request: Request,
    response: Response,
    db: AsyncSession = Depends(get_sql_session),
):
    """
    Generate new access token using valid refresh token.

    Args:
        request: HTTP request object containing cookies
        response: HTTP response object for setting cookies
        db: Database session dependency

    Returns:
        TokenResponse containing new access token and user role
    """
    refresh_token = request.cookies.get("refresh_token")
    if not refresh_token:
        raise CredentialsException("No refresh token found")

    result = await auth_service.refresh(db, refresh_token)

    _set_refresh_cookie(response, result.refresh_token)
    return schemas.TokenResponse(access_token=result.access_token, role=result.role)


@router.get("/me", response_model=schemas.UserPublic)
async def me(current_user: models.User = Depends(get_current_user)):
    return current_user
