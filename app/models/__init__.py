from . import enums
from .base import Base, TimestampMixin
from .enums import (
    RoleName,
    CarStatusEnum,
    TestDriveStatusEnum,
    DayOfWeekEnum,
    CarSortEnum,
    ACTIVE_TEST_DRIVE_STATUSES,
)
from .user_models import User, UserSession, RevokedToken
from .car_models import Car, UserSavedCar
from .test_drive_models import TestDriveBooking
from .dealership_models import DealershipInfo, WorkingHour


__all__ = [
    "enums",
    "Base",
    "TimestampMixin",
    "RoleName",
    "CarStatusEnum",
    "TestDriveStatusEnum",
    "DayOfWeekEnum",
    "CarSortEnum",
    "ACTIVE_TEST_DRIVE_STATUSES",
    "User",
    "UserSession",
    "RevokedToken",
    "Car",
    "UserSavedCar",
    "TestDriveBooking",
    "DealershipInfo",
    "WorkingHour",
]
