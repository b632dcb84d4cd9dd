import uuid
from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    Enum,
    Numeric,
    Boolean,
    Text,
    JSON,
    Index,
    UniqueConstraint,
    DateTime,
    func,
)
from sqlalchemy.orm import relationship


from .base import Base, TimestampMixin, utcnow
from .enums import CarStatusEnum


class Car(Base, TimestampMixin):
    """
    A car listing offered by the dealership.
    """

    __tablename__ = "cars"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    make = Column(String(100), nullable=False)
    model = Column(String(100), nullable=False)
    year = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    mileage = Column(Integer, nullable=False)
    color = Column(String(50), nullable=False)
    fuel_type = Column(String(50), nullable=False)
    transmission = Column(String(50), nullable=False)
    body_type = Column(String(50), nullable=False)
    seats = Column(Integer, nullable=True)
    description = Column(Text, nullable=False)
    status = Column(
        Enum(CarStatusEnum, name="car_status_enum"),
        nullable=False,
        default=CarStatusEnum.AVAILABLE,
    )
    featured = Column(Boolean, nullable=False, default=False)
    images = Column(JSON, nullable=False, default=list)

    saved_by = relationship(
        "UserSavedCar",
        back_populates="car",
        cascade="all, delete-orphan",
        lazy="select",
    )
    test_drives = relationship(
        "TestDriveBooking",
        back_populates="car",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (
        Index("ix_cars_make_model", "make", "model"),
        Index("ix_cars_status", "status"),
        Index("ix_cars_price", "price"),
    )


class UserSavedCar(Base):
    """
    Association between a user and a car they added to their wishlist.
    """

    __tablename__ = "user_saved_cars"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    car_id = Column(String(36), ForeignKey("cars.id"), nullable=False, index=True)
    saved_at = Column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        nullable=False,
    )

    user = relationship("User", back_populates="saved_cars", lazy="selectin")
    car = relationship("Car", back_populates="saved_by", lazy="selectin")

    __table_args__ = (
        UniqueConstraint("user_id", "car_id", name="uq_user_saved_car"),
    )
