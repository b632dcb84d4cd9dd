from pydantic import EmailStr, Field
from typing import Optional
from datetime import datetime


from app.models.enums import RoleName
from .utility_schemas import BaseSchema


class TokenPayload(BaseSchema):
    """
    Schema for JWT token payload data.
    """
    sub: str = Field(..., description="Subject (user ID)")
    jti: str = Field(..., description="JWT unique identifier")
    exp: datetime = Field(..., description="Token expiration timestamp")
    type: str = Field(..., description="Token type (access/refresh)")


class Token(BaseSchema):
    """
    Schema for authentication token pair response.
    """
    access_token: str = Field(..., description="JWT access token for API authorization")
    refresh_token: str = Field(
        ..., description="JWT refresh token for obtaining new access tokens"
    )
    role: Optional[str] = Field(None, description="User role associated with the token")


class TokenResponse(BaseSchema):
    """
    Schema for authentication token response (access token only).
    """
    access_token: str = Field(..., description="JWT access token for API authorization")
    token_type: str = Field("bearer", description="Token type for the Authorization header")
    role: Optional[str] = Field(None, description="User role associated with the token")


class UserCreate(BaseSchema):
    """
    Schema for registering a new user.
    """
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailStr = Field(..., description="Login email address")
    password: str = Field(..., min_length=8, description="Plain text password")
    phone: Optional[str] = Field(None, max_length=20, description="Contact phone number")


class UserPublic(BaseSchema):
    """
    Schema for user information returned by the API.
    """
    id: str = Field(..., description="User unique identifier")
    name: Optional[str] = Field(None, description="Display name")
    email: str = Field(..., description="Email address")
    phone: Optional[str] = Field(None, description="Contact phone number")
    image_url: Optional[str] = Field(None, description="Avatar URL")
    role: RoleName = Field(..., description="User role")
    created_at: datetime = Field(..., description="Registration timestamp")


class UserRoleUpdate(BaseSchema):
    """
    Schema for promoting or demoting a user.
    """
    role: RoleName = Field(..., description="New role for the user")


class AdminCheckResponse(BaseSchema):
    """
    Schema describing whether the caller may use the admin area.
    """
    authorized: bool
    reason: Optional[str] = None
    user: Optional[UserPublic] = None
