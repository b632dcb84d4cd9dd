from fastapi import APIRouter, Depends, Security
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List


from app import models, schemas
from app.auth.dependencies import get_current_user
from app.core.dependencies import get_sql_session
from app.services import car_listing_service


router = APIRouter()


@router.post("/{car_id}", response_model=schemas.SavedCarToggleResponse)
async def toggle_saved_car(
    car_id: str,
    db: AsyncSession = Depends(get_sql_session),
    current_user: models.User = Security(get_current_user, scopes=["wishlist:manage"]),
):
    """
    Add a car to the wishlist, or remove it when already saved.

    Args:
        car_id: Car identifier
        db: Database session dependency
        current_user: Authenticated user with wishlist:manage permission

    Returns:
        Whether the car is now saved
    """
    return await car_listing_service.toggle_saved_car(db, car_id, current_user)


@router.get("", response_model=List[schemas.CarPublic])
async def get_saved_cars(
    db: AsyncSession = Depends(get_sql_session),
    current_user: models.User = Security(get_current_user, scopes=["wishlist:manage"]),
):
    """
    List the caller's saved cars, most recently saved first.
    """
    return await car_listing_service.get_saved_cars(db, current_user)
