from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import List, Optional
from datetime import datetime, date
from decimal import Decimal


from app.models.enums import CarStatusEnum, CarSortEnum, TestDriveStatusEnum
from .utility_schemas import PaginationMeta
from .dealership_schemas import DealershipPublic


class CarBase(BaseModel):
    """
    Schema for the descriptive fields of a listing.
    """
    make: str = Field(..., min_length=1, max_length=100)
    model: str = Field(..., min_length=1, max_length=100)
    year: int
    price: Decimal = Field(..., ge=0)
    mileage: int = Field(..., ge=0)
    color: str = Field(..., min_length=1, max_length=50)
    fuel_type: str = Field(..., min_length=1, max_length=50)
    transmission: str = Field(..., min_length=1, max_length=50)
    body_type: str = Field(..., min_length=1, max_length=50)
    seats: Optional[int] = Field(None, ge=1, le=20)
    description: str = Field(..., min_length=10)


class CarCreate(CarBase):
    """
    Schema for creating a new listing. Images are uploaded separately.
    """
    status: CarStatusEnum = CarStatusEnum.AVAILABLE
    featured: bool = False

    @field_validator("year")
    @classmethod
    def validate_year(cls, value: int) -> int:
        if value < 1900 or value > date.today().year + 1:
            raise ValueError("Year must be a valid year")
        return value


class CarStatusUpdate(BaseModel):
    """
    Schema for changing a listing's status and/or featured flag.
    """
    status: Optional[CarStatusEnum] = None
    featured: Optional[bool] = None

    @model_validator(mode="after")
    def check_any_field(self):
        if self.status is None and self.featured is None:
            raise ValueError("Provide status or featured")
        return self


class CarPublic(BaseModel):
    """
    Schema for a listing as returned to clients.
    """
    id: str
    make: str
    model: str
    year: int
    price: float
    mileage: int
    color: str
    fuel_type: str
    transmission: str
    body_type: str
    seats: Optional[int] = None
    description: str
    status: CarStatusEnum
    featured: bool
    images: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    wishlisted: bool = False

    model_config = ConfigDict(from_attributes=True)

    @field_validator("price", mode="before")
    @classmethod
    def price_to_float(cls, value):
        return float(value) if value is not None else 0.0


class CarFilterParams(BaseModel):
    """
    Schema for public listing search parameters.
    """
    search: Optional[str] = None
    make: Optional[str] = None
    body_type: Optional[str] = None
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    min_price: float = 0
    max_price: Optional[float] = None
    page: int = Field(1, ge=1)
    limit: int = Field(6, ge=1, le=100)
    sort_by: str = CarSortEnum.NEWEST.value


class PriceRange(BaseModel):
    """
    Schema for the price bounds of available listings.
    """
    min: float
    max: float


class CarFiltersResponse(BaseModel):
    """
    Schema for the values the search sidebar can offer.
    """
    makes: List[str]
    body_types: List[str]
    fuel_types: List[str]
    transmissions: List[str]
    price_range: PriceRange


class PaginatedCarResponse(BaseModel):
    """
    Schema for a page of listings.
    """
    data: List[CarPublic]
    pagination: PaginationMeta


class UserTestDriveSummary(BaseModel):
    """
    Schema for the caller's latest test drive of a listing.
    """
    id: str
    status: TestDriveStatusEnum
    booking_date: date

    model_config = ConfigDict(from_attributes=True)


class TestDriveInfo(BaseModel):
    """
    Schema for the test drive context shown on a listing page.
    """
    user_test_drive: Optional[UserTestDriveSummary] = None
    dealership: Optional[DealershipPublic] = None


class CarDetails(CarPublic):
    """
    Schema for a single listing with test drive context.
    """
    test_drive_info: TestDriveInfo


class SavedCarToggleResponse(BaseModel):
    """
    Schema for the result of adding or removing a wishlist entry.
    """
    saved: bool
    message: str
