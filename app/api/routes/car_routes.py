from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional


from app import models, schemas
from app.auth.dependencies import get_optional_user
from app.core.dependencies import get_sql_session
from app.services import car_listing_service


router = APIRouter()


@router.get("/filters", response_model=schemas.CarFiltersResponse)
async def get_car_filters(db: AsyncSession = Depends(get_sql_session)):
    """
    Distinct makes, body types, fuel types, transmissions and the price range
    of available cars.
    """
    return await car_listing_service.get_car_filters(db)


@router.get("", response_model=schemas.PaginatedCarResponse)
async def get_cars(
    search: Optional[str] = None,
    make: Optional[str] = None,
    body_type: Optional[str] = None,
    fuel_type: Optional[str] = None,
    transmission: Optional[str] = None,
    min_price: float = Query(0, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    page: int = Query(1, ge=1),
    limit: int = Query(6, ge=1, le=100),
    sort_by: str = Query("newest", description="newest, priceAsc or priceDesc"),
    db: AsyncSession = Depends(get_sql_session),
    current_user: Optional[models.User] = Depends(get_optional_user),
):
    """
    Search available cars with filters, sorting and pagination.

    Args:
        search: Text matched against make, model and description
        make: Exact make, case-insensitive
        body_type: Exact body type, case-insensitive
        fuel_type: Exact fuel type, case-insensitive
        transmission: Exact transmission, case-insensitive
        min_price: Lowest price
        max_price: Highest price, unbounded when omitted
        page: Page number, starting at 1
        limit: Cars per page
        sort_by: Sort order, unknown values fall back to newest
        db: Database session dependency
        current_user: Caller, used for wishlist flags

    Returns:
        Page of cars with pagination metadata
    """
    filters = schemas.CarFilterParams(
        search=search,
        make=make,
        body_type=body_type,
        fuel_type=fuel_type,
        transmission=transmission,
        min_price=min_price,
        max_price=max_price,
        page=page,
        limit=limit,
        sort_by=sort_by,
    )
    return await car_listing_service.get_cars(db, filters, current_user)


@router.get("/{car_id}", response_model=schemas.CarDetails)
async def get_car(
    car_id: str,
    db: AsyncSession = Depends(get_sql_session),
    current_user: Optional[models.User] = Depends(get_optional_user),
):
    """
    Get car details with wishlist flag and test drive information.

    Args:
        car_id: Car identifier
        db: Database session dependency
        current_user: Caller, if signed in

    Returns:
        Car details including the dealership schedule
    """
    return await car_listing_service.get_car_by_id(db, car_id, current_user)


@router.get("/{car_id}/emi", response_model=schemas.EmiResult)
async def calculate_emi(
    car_id: str,
    down_payment: Optional[float] = Query(None, ge=0),
    interest_rate: float = Query(5.0, ge=0, le=100),
    tenure_years: int = Query(1),
    db: AsyncSession = Depends(get_sql_session),
):
    """
    Estimate the monthly loan instalment for a car.

    Args:
        car_id: Car identifier
        down_payment: Down payment, at least 15% of the price
        interest_rate: Annual interest rate in percent
        tenure_years: Loan tenure, clamped to 1-20 years
        db: Database session dependency

    Returns:
        EMI breakdown
    """
    return await car_listing_service.calculate_car_emi(
        db, car_id, down_payment, interest_rate, tenure_years
    )
