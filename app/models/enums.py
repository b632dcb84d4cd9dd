import enum


class RoleName(str, enum.Enum):
    """
    User roles in the system.
    """

    USER = "USER"
    ADMIN = "ADMIN"


class CarStatusEnum(str, enum.Enum):
    """Listing availability status."""

    AVAILABLE = "AVAILABLE"
    UNAVAILABLE = "UNAVAILABLE"
    SOLD = "SOLD"


class TestDriveStatusEnum(str, enum.Enum):
    """Test drive booking states throughout its lifecycle."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    NO_SHOW = "NO_SHOW"


class DayOfWeekEnum(str, enum.Enum):
    """Days the dealership can be open."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


class CarSortEnum(str, enum.Enum):
    """Sort orders accepted by the public listing search."""

    NEWEST = "newest"
    PRICE_ASC = "priceAsc"
    PRICE_DESC = "priceDesc"


# Statuses that hold a slot and block a second booking of the same start time.
ACTIVE_TEST_DRIVE_STATUSES = (
    TestDriveStatusEnum.PENDING,
    TestDriveStatusEnum.CONFIRMED,
)
