from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional


from app import models, schemas
from app.auth.dependencies import get_optional_user
from app.core.dependencies import get_sql_session
from app.services import home_service


router = APIRouter()


@router.get("/featured", response_model=List[schemas.CarPublic])
async def get_featured_cars(
    limit: int = Query(3, ge=1, le=20),
    db: AsyncSession = Depends(get_sql_session),
    current_user: Optional[models.User] = Depends(get_optional_user),
):
    """
    Newest featured cars that are still available.

    Args:
        limit: Maximum number of cars
        db: Database session dependency
        current_user: Caller, used for wishlist flags

    Returns:
        List of featured cars
    """
    return await home_service.get_featured_cars(db, limit, current_user)


@router.post("/image-search", response_model=schemas.ImageSearchExtraction)
async def image_search(file: UploadFile = File(...)):
    """
    Read make, body type and color from a car photo to seed a search.

    Args:
        file: Car photo

    Returns:
        Extracted search hints with a confidence score
    """
    data = await file.read()
    return await home_service.process_image_search(data, file.content_type)
