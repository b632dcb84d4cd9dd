from pydantic import BaseModel


class CarStats(BaseModel):
    """
    Schema for inventory counters.
    """
    total: int
    available: int
    sold: int
    unavailable: int
    featured: int


class TestDriveStats(BaseModel):
    """
    Schema for booking counters and conversion.
    """
    total: int
    pending: int
    confirmed: int
    completed: int
    cancelled: int
    no_show: int
    conversion_rate: float


class DashboardResponse(BaseModel):
    """
    Schema for the admin dashboard overview.
    """
    cars: CarStats
    test_drives: TestDriveStats
