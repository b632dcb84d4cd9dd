import uuid
from sqlalchemy import (
    Column,
    String,
    ForeignKey,
    Boolean,
    DateTime,
    Enum,
    Text,
    func,
)
from sqlalchemy.orm import relationship


from .base import Base, TimestampMixin
from .enums import RoleName


class User(Base, TimestampMixin):
    """
    Table to store all user information.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(255), nullable=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password = Column(String(255), nullable=False)
    phone = Column(String(20), nullable=True)
    image_url = Column(String(512), nullable=True)
    role = Column(
        Enum(RoleName, name="role_name_enum"), nullable=False, default=RoleName.USER
    )

    saved_cars = relationship(
        "UserSavedCar",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )
    test_drives = relationship(
        "TestDriveBooking",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )
    sessions = relationship(
        "UserSession",
        back_populates="user",
        cascade="all, delete-orphan",
        lazy="select",
    )


class UserSession(Base):
    """
    Tracks user sessions for JWT refresh tokens.
    """

    __tablename__ = "user_sessions"

    jti = Column(String(255), primary_key=True, doc="JWT ID")
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    refresh_token = Column(String(512), unique=True, nullable=False)
    is_revoked = Column(Boolean, nullable=False, default=False)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    device_info = Column(Text, nullable=False)
    ip_address = Column(String(45), nullable=False)
    created_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    user = relationship("User", back_populates="sessions", lazy="selectin")


class RevokedToken(Base):
    """
    Tracks revoked JWT tokens.
    """

    __tablename__ = "revoked_tokens"

    jti = Column(String(255), primary_key=True, doc="JWT ID")
    revoked_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    expires_at = Column(DateTime(timezone=True), nullable=False)
