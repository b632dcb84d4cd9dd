from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    Enum,
    Boolean,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship


from .base import Base, TimestampMixin
from .enums import DayOfWeekEnum


class DealershipInfo(Base, TimestampMixin):
    """
    Dealership contact details shown next to listings and test drive forms.
    """

    __tablename__ = "dealership_info"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    address = Column(String(500), nullable=False)
    phone = Column(String(50), nullable=False)
    email = Column(String(255), nullable=False)

    working_hours = relationship(
        "WorkingHour",
        back_populates="dealership",
        cascade="all, delete-orphan",
        order_by="WorkingHour.id",
        lazy="selectin",
    )


class WorkingHour(Base, TimestampMixin):
    """
    Opening hours of the dealership for one day of the week.
    """

    __tablename__ = "working_hours"

    id = Column(Integer, primary_key=True, autoincrement=True)
    dealership_id = Column(
        Integer, ForeignKey("dealership_info.id"), nullable=False, index=True
    )
    day_of_week = Column(Enum(DayOfWeekEnum, name="day_of_week_enum"), nullable=False)
    open_time = Column(String(5), nullable=False, default="09:00")
    close_time = Column(String(5), nullable=False, default="18:00")
    is_open = Column(Boolean, nullable=False, default=True)

    dealership = relationship(
        "DealershipInfo", back_populates="working_hours", lazy="selectin"
    )

    __table_args__ = (
        UniqueConstraint("dealership_id", "day_of_week", name="uq_dealership_day"),
    )
