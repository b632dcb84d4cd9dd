from fastapi import APIRouter, Depends, Security, UploadFile, File, Form, Query
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional
from decimal import Decimal


from app import models, schemas
from app.auth.dependencies import get_current_user
from app.core.dependencies import get_sql_session
from app.services import (
    dashboard_service,
    inventory_service,
    settings_service,
    test_drive_service,
)


router = APIRouter()


@router.get("/me", response_model=schemas.AdminCheckResponse)
async def get_admin(current_user: models.User = Depends(get_current_user)):
    """
    Tell the client whether the caller may use the admin area.

    Args:
        current_user: Authenticated user

    Returns:
        Authorization flag, reason when refused, and the user
    """
    if current_user.role != models.RoleName.ADMIN:
        return schemas.AdminCheckResponse(authorized=False, reason="not-admin")
    return schemas.AdminCheckResponse(
        authorized=True, user=schemas.UserPublic.model_validate(current_user)
    )


@router.post("/cars", response_model=schemas.CarPublic, status_code=201)
async def add_car(
    make: str = Form(...),
    model: str = Form(...),
    year: int = Form(...),
    price: Decimal = Form(...),
    mileage: int = Form(...),
    color: str = Form(...),
    fuel_type: str = Form(...),
    transmission: str = Form(...),
    body_type: str = Form(...),
    description: str = Form(...),
    seats: Optional[int] = Form(None),
    status: models.CarStatusEnum = Form(models.CarStatusEnum.AVAILABLE),
    featured: bool = Form(False),
    images: List[UploadFile] = File(..., description="Car images, at least one"),
    db: AsyncSession = Depends(get_sql_session),
    _: models.User = Security(get_current_user, scopes=["cars:create"]),
):
    """
    Create a new car listing with images.

    Args:
        make: Manufacturer
        model: Model name
        year: Model year
        price: Asking price
        mileage: Odometer reading
        color: Exterior color
        fuel_type: Fuel type
        transmission: Transmission type
        body_type: Body style
        description: Listing description, at least 10 characters
        seats: Optional number of seats
        status: Initial status
        featured: Whether the car is featured on the home page
        images: Uploaded images, non-image files are skipped
        db: Database session dependency

    Returns:
        Newly created car
    """
    car_in = schemas.CarCreate(
        make=make,
        model=model,
        year=year,
        price=price,
        mileage=mileage,
        color=color,
        fuel_type=fuel_type,
        transmission=transmission,
        body_type=body_type,
        description=description,
        seats=seats,
        status=status,
        featured=featured,
    )
    return await inventory_service.add_car(db, car_in, images)


@router.get("/cars", response_model=List[schemas.CarPublic])
async def get_admin_cars(
    search: Optional[str] = None,
    db: AsyncSession = Depends(get_sql_session),
    _: models.User = Security(get_current_user, scopes=["cars:update"]),
):
    """
    List all cars in any status, newest first.

    Args:
        search: Text matched against make, model and color
        db: Database session dependency

    Returns:
        List of cars
    """
    return await inventory_service.get_admin_cars(db, search)


@router.post("/cars/ai-extract", response_model=schemas.CarImageExtraction)
async def process_car_image_with_ai(
    file: UploadFile = File(...),
    _: models.User = Security(get_current_user, scopes=["ai:extract"]),
):
    """
    Suggest listing fields from a car photo.

    Args:
        file: Car photo

    Returns:
        Extracted listing fields with a confidence score
    """
    data = await file.read()
    return await inventory_service.process_car_image_with_ai(data, file.content_type)


@router.patch("/cars/{car_id}", response_model=schemas.CarPublic)
async def update_car_status(
    car_id: str,
    update_in: schemas.CarStatusUpdate,
    db: AsyncSession = Depends(get_sql_session),
    _: models.User = Security(get_current_user, scopes=["cars:update"]),
):
    """
    Change a car's status and/or featured flag.
    """
    return await inventory_service.update_car_status(db, car_id, update_in)


@router.delete("/cars/{car_id}", response_model=schemas.Msg)
async def delete_car(
    car_id: str,
    db: AsyncSession = Depends(get_sql_session),
    _: models.User = Security(get_current_user, scopes=["cars:delete"]),
):
    """
    Delete a car with its wishlist entries, bookings and images.

    Args:
        car_id: Car identifier
        db: Database session dependency

    Returns:
        Confirmation message
    """
    await inventory_service.delete_car(db, car_id)
    return schemas.Msg(message="Car deleted successfully")


@router.get("/test-drives", response_model=List[schemas.AdminTestDrivePublic])
async def get_admin_test_drives(
    search: Optional[str] = None,
    status: Optional[str] = Query(None, description="Filter by booking status"),
    db: AsyncSession = Depends(get_sql_session),
    _: models.User = Security(get_current_user, scopes=["test-drives:manage"]),
):
    """
    List all test drive bookings with car and customer.

    Args:
        search: Text matched against car make/model and customer name/email
        status: Booking status filter
        db: Database session dependency

    Returns:
        Bookings ordered by date descending, then start time
    """
    return await test_drive_service.get_admin_test_drives(db, search, status)


@router.patch("/test-drives/{booking_id}/status", response_model=schemas.AdminTestDrivePublic)
async def update_test_drive_status(
    booking_id: str,
    status_in: schemas.TestDriveStatusUpdate,
    db: AsyncSession = Depends(get_sql_session),
    _: models.User = Security(get_current_user, scopes=["test-drives:manage"]),
):
    return await test_drive_service.update_test_drive_status(
        db, booking_id, status_in.status
    )


@router.get("/dashboard", response_model=schemas.DashboardResponse)
async def get_dashboard_data(
    db: AsyncSession = Depends(get_sql_session),
    _: models.User = Security(get_current_user, scopes=["dashboard:read"]),
):
    """
    Inventory and test drive statistics.
    """
    return await dashboard_service.get_dashboard_data(db)


@router.get("/settings/dealership", response_model=schemas.DealershipPublic)
async def get_dealership_info(
    db: AsyncSession = Depends(get_sql_session),
    _: models.User = Security(get_current_user, scopes=["settings:manage"]),
):
    return await settings_service.get_dealership_info(db)


@router.put("/settings/working-hours", response_model=schemas.DealershipPublic)
async def save_working_hours(
    hours_in: List[schemas.WorkingHourIn],
    db: AsyncSession = Depends(get_sql_session),
    _: models.User = Security(get_current_user, scopes=["settings:manage"]),
):
    """
    Save the dealership's weekly opening hours.

    Args:
        hours_in: One entry per day of the week to update
        db: Database session dependency

    Returns:
        Dealership with the saved schedule
    """
    return await settings_service.save_working_hours(db, hours_in)


@router.get("/users", response_model=List[schemas.UserPublic])
async def get_users(
    db: AsyncSession = Depends(get_sql_session),
    _: models.User = Security(get_current_user, scopes=["users:manage"]),
):
    return await settings_service.get_users(db)


@router.patch("/users/{user_id}/role", response_model=schemas.UserPublic)
async def update_user_role(
    user_id: str,
    role_in: schemas.UserRoleUpdate,
    db: AsyncSession = Depends(get_sql_session),
    current_user: models.User = Security(get_current_user, scopes=["users:manage"]),
):
    """
    Promote a user to admin or demote an admin to user.

    Args:
        user_id: User identifier
        role_in: New role
        db: Database session dependency
        current_user: Admin making the change, who cannot change their own role

    Returns:
        Updated user
    """
    return await settings_service.update_user_role(db, user_id, role_in, current_user)
