from .utility_schemas import BaseSchema, Msg, PaginationMeta
from .user_schemas import (
    TokenPayload,
    Token,
    TokenResponse,
    UserCreate,
    UserPublic,
    UserRoleUpdate,
    AdminCheckResponse,
)
from .dealership_schemas import (
    WorkingHourIn,
    WorkingHourPublic,
    DealershipPublic,
)
from .car_schemas import (
    CarCreate,
    CarStatusUpdate,
    CarPublic,
    CarFilterParams,
    PriceRange,
    CarFiltersResponse,
    PaginatedCarResponse,
    UserTestDriveSummary,
    TestDriveInfo,
    CarDetails,
    SavedCarToggleResponse,
)
from .test_drive_schemas import (
    TestDriveCreate,
    TestDriveUser,
    TestDrivePublic,
    AdminTestDrivePublic,
    TestDriveStatusUpdate,
)
from .dashboard_schemas import CarStats, TestDriveStats, DashboardResponse
from .ai_schemas import ImageSearchExtraction, CarImageExtraction
from .finance_schemas import EmiRequest, EmiResult
