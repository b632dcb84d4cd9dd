from .auth_crud import auth_crud
from .car_crud import car_crud
from .dealership_crud import dealership_crud
from .test_drive_crud import test_drive_crud
from .user_crud import user_crud


__all__ = [
    "auth_crud",
    "car_crud",
    "dealership_crud",
    "test_drive_crud",
    "user_crud",
]
