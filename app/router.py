from fastapi import APIRouter
from app.api.routes import (
    auth_routes,
    car_routes,
    saved_car_routes,
    home_routes,
    test_drive_routes,
    admin_routes,
    finance_routes,
)

# Master router that bundles all service routers
router = APIRouter()

router.include_router(auth_routes.router, prefix="/auth", tags=["Authentication"])
router.include_router(car_routes.router, prefix="/cars", tags=["Car Listings"])
router.include_router(saved_car_routes.router, prefix="/saved-cars", tags=["Wishlist"])
router.include_router(home_routes.router, prefix="/home", tags=["Home"])
router.include_router(test_drive_routes.router, prefix="/test-drives", tags=["Test Drives"])
router.include_router(admin_routes.router, prefix="/admin", tags=["Admin"])
router.include_router(finance_routes.router, prefix="/finance", tags=["Finance"])
