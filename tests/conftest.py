import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("ACCESS_TOKEN_SECRET_KEY", "test-access-secret")
os.environ.setdefault("REFRESH_TOKEN_SECRET_KEY", "test-refresh-secret")
os.environ.setdefault("SUPER_ADMIN_NAME", "Super Admin")
os.environ.setdefault("SUPER_ADMIN_EMAIL", "admin@vahaan.com")
os.environ.setdefault("SUPER_ADMIN_PASSWORD", "admin-password")
os.environ.setdefault(
    "AZURE_STORAGE_CONNECTION_STRING",
    "DefaultEndpointsProtocol=http;AccountName=devstoreaccount1;"
    "AccountKey=Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/K1SZFPTOtr/KBHBeksoGMGw==;"
    "BlobEndpoint=http://127.0.0.1:10000/devstoreaccount1;",
)
os.environ.setdefault("OPENAI_API_KEY", "sk-test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LANGSMITH_TRACING", "false")

import uuid
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from main import app
from app import models
from app.auth import security
from app.core.dependencies import get_sql_session


PASSWORD = "password123"
HASHED_PASSWORD = security.get_password_hash(PASSWORD)
IMAGE_URL = "http://127.0.0.1:10000/devstoreaccount1/car-images/cars/seed/image-1-0.jpeg"


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(models.Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory):
    async def override_get_sql_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_sql_session] = override_get_sql_session
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://localhost"
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    async def _make_user(
        email: str = None,
        name: str = "Test User",
        role: models.RoleName = models.RoleName.USER,
    ) -> models.User:
        user = models.User(
            name=name,
            email=email or f"user-{uuid.uuid4().hex[:8]}@example.com",
            password=HASHED_PASSWORD,
            role=role,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def user(make_user):
    return await make_user(email="alice@example.com", name="Alice Driver")


@pytest.fixture
async def admin(make_user):
    return await make_user(
        email="boss@example.com", name="Dealer Boss", role=models.RoleName.ADMIN
    )


def auth_headers(user: models.User) -> dict:
    token = security.create_access_token(subject=user.id, jti=str(uuid.uuid4()))
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def user_headers(user):
    return auth_headers(user)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def make_car(db):
    created = {"count": 0}

    async def _make_car(**overrides) -> models.Car:
        # Spread creation times so "newest" ordering is deterministic
        created["count"] += 1
        fields = dict(
            make="Toyota",
            model="Camry",
            year=2022,
            price=Decimal("25000"),
            mileage=12000,
            color="White",
            fuel_type="Petrol",
            transmission="Automatic",
            body_type="Sedan",
            seats=5,
            description="A well kept family sedan with full service history.",
            status=models.CarStatusEnum.AVAILABLE,
            featured=False,
            images=[IMAGE_URL],
            created_at=datetime(2026, 1, 1, tzinfo=timezone.utc)
            + timedelta(minutes=created["count"]),
        )
        fields.update(overrides)
        car = models.Car(**fields)
        db.add(car)
        await db.commit()
        await db.refresh(car)
        return car

    return _make_car


@pytest.fixture
def make_booking(db):
    async def _make_booking(
        car: models.Car,
        user: models.User,
        booking_date,
        start_time: str = "10:00",
        end_time: str = "11:00",
        status: models.TestDriveStatusEnum = models.TestDriveStatusEnum.PENDING,
    ) -> models.TestDriveBooking:
        booking = models.TestDriveBooking(
            car_id=car.id,
            user_id=user.id,
            booking_date=booking_date,
            start_time=start_time,
            end_time=end_time,
            status=status,
        )
        db.add(booking)
        await db.commit()
        await db.refresh(booking)
        return booking

    return _make_booking


class FakeLLMReply:
    def __init__(self, content: str):
        self.content = content


class FakeLLM:
    """Stands in for ChatOpenAI and records the messages it was sent."""

    def __init__(self, reply: str):
        self.reply = reply
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        return FakeLLMReply(self.reply)


@pytest.fixture
def fake_llm(monkeypatch):
    from app.services.ai_services import vision_service

    def _install(reply: str) -> FakeLLM:
        llm = FakeLLM(reply)
        monkeypatch.setattr(vision_service, "_llm", llm)
        return llm

    return _install


@pytest.fixture
def fake_storage(monkeypatch):
    from app.services.storage_services import storage_service

    state = {"uploaded": [], "deleted": []}

    async def upload_car_image(car_id, data, content_type, index):
        url = f"http://127.0.0.1:10000/devstoreaccount1/car-images/cars/{car_id}/image-{index}.jpeg"
        state["uploaded"].append((car_id, content_type, index, data))
        return url

    async def delete_car_images(image_urls):
        state["deleted"].extend(image_urls)

    monkeypatch.setattr(storage_service, "upload_car_image", upload_car_image)
    monkeypatch.setattr(storage_service, "delete_car_images", delete_car_images)
    return state
