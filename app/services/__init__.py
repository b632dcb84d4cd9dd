from .auth_services import auth_service
from .ai_services import vision_service
from .car_listing_services import car_listing_service
from .dashboard_services import dashboard_service
from .finance_services import finance_service
from .home_services import home_service
from .inventory_services import inventory_service
from .settings_services import settings_service
from .storage_services import storage_service
from .test_drive_services import test_drive_service


__all__ = [
    "auth_service",
    "vision_service",
    "car_listing_service",
    "dashboard_service",
    "finance_service",
    "home_service",
    "inventory_service",
    "settings_service",
    "storage_service",
    "test_drive_service",
]
