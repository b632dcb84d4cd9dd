from datetime import date

import pytest
from sqlalchemy import select

from app import models


CAR_FORM = {
    "make": "Tata",
    "model": "Nexon",
    "year": "2023",
    "price": "18000",
    "mileage": "5000",
    "color": "Blue",
    "fuel_type": "Electric",
    "transmission": "Automatic",
    "body_type": "SUV",
    "description": "Compact electric SUV with fast charging.",
    "seats": "5",
}


async def test_admin_check(client, user_headers, admin_headers):
    as_user = await client.get("/api/admin/me", headers=user_headers)
    as_admin = await client.get("/api/admin/me", headers=admin_headers)

    assert as_user.json() == {"authorized": False, "reason": "not-admin", "user": None}
    assert as_admin.json()["authorized"] is True
    assert as_admin.json()["user"]["role"] == "ADMIN"


@pytest.mark.parametrize(
    "method, path",
    [
        ("get", "/api/admin/cars"),
        ("get", "/api/admin/test-drives"),
        ("get", "/api/admin/dashboard"),
        ("get", "/api/admin/settings/dealership"),
        ("get", "/api/admin/users"),
        ("delete", "/api/admin/cars/any"),
    ],
)
async def test_admin_routes_reject_regular_users(client, user_headers, method, path):
    response = await getattr(client, method)(path, headers=user_headers)

    assert response.status_code == 403


async def test_add_car_uploads_images_and_skips_other_files(
    client, admin_headers, fake_storage
):
    response = await client.post(
        "/api/admin/cars",
        data={**CAR_FORM, "featured": "true"},
        files=[
            ("images", ("front.jpg", b"jpeg-bytes", "image/jpeg")),
            ("images", ("notes.txt", b"not an image", "text/plain")),
            ("images", ("side.png", b"png-bytes", "image/png")),
        ],
        headers=admin_headers,
    )

    assert response.status_code == 201
    body = response.json()
    assert body["make"] == "Tata"
    assert body["price"] == 18000.0
    assert body["featured"] is True
    assert body["status"] == "AVAILABLE"
    assert len(body["images"]) == 2
    assert [u[1] for u in fake_storage["uploaded"]] == ["image/jpeg", "image/png"]
    assert {u[0] for u in fake_storage["uploaded"]} == {body["id"]}


async def test_add_car_without_valid_images_is_rejected(
    client, admin_headers, fake_storage
):
    response = await client.post(
        "/api/admin/cars",
        data=CAR_FORM,
        files=[("images", ("notes.txt", b"not an image", "text/plain"))],
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "No valid images were uploaded"
    assert fake_storage["uploaded"] == []


async def test_add_car_validates_fields(client, admin_headers, fake_storage):
    response = await client.post(
        "/api/admin/cars",
        data={**CAR_FORM, "description": "short"},
        files=[("images", ("front.jpg", b"jpeg-bytes", "image/jpeg"))],
        headers=admin_headers,
    )

    assert response.status_code == 422
    assert fake_storage["uploaded"] == []


async def test_admin_cars_include_every_status_and_search_color(
    client, make_car, admin_headers
):
    red = await make_car(color="Red", status=models.CarStatusEnum.SOLD)
    white = await make_car(color="White")

    everything = await client.get("/api/admin/cars", headers=admin_headers)
    reds = await client.get("/api/admin/cars", params={"search": "red"}, headers=admin_headers)

    assert [c["id"] for c in everything.json()] == [white.id, red.id]
    assert [c["id"] for c in reds.json()] == [red.id]


async def test_update_car_status_and_featured(client, make_car, admin_headers):
    car = await make_car()

    sold = await client.patch(
        f"/api/admin/cars/{car.id}", json={"status": "SOLD"}, headers=admin_headers
    )
    featured = await client.patch(
        f"/api/admin/cars/{car.id}", json={"featured": True}, headers=admin_headers
    )

    assert sold.json()["status"] == "SOLD"
    assert featured.json()["status"] == "SOLD"
    assert featured.json()["featured"] is True


async def test_update_car_requires_a_field(client, make_car, admin_headers):
    car = await make_car()

    empty = await client.patch(f"/api/admin/cars/{car.id}", json={}, headers=admin_headers)
    missing = await client.patch(
        "/api/admin/cars/missing", json={"featured": True}, headers=admin_headers
    )

    assert empty.status_code == 422
    assert missing.status_code == 404


async def test_delete_car_removes_wishlist_bookings_and_images(
    client, db, make_car, make_booking, user, admin_headers, fake_storage
):
    car = await make_car(images=["http://blob/car-images/cars/x/image-1-0.jpeg"])
    car_id = car.id
    db.add(models.UserSavedCar(user_id=user.id, car_id=car.id))
    await db.commit()
    await make_booking(car, user, date(2026, 11, 10))

    response = await client.delete(f"/api/admin/cars/{car_id}", headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"message": "Car deleted successfully"}
    assert fake_storage["deleted"] == ["http://blob/car-images/cars/x/image-1-0.jpeg"]
    db.expire_all()
    saved = await db.execute(select(models.UserSavedCar))
    bookings = await db.execute(select(models.TestDriveBooking))
    assert saved.scalars().all() == []
    assert bookings.scalars().all() == []
    assert (await client.get(f"/api/cars/{car_id}")).status_code == 404


async def test_admin_test_drives_search_and_status(
    client, make_car, make_booking, make_user, user, admin_headers
):
    camry = await make_car()
    thar = await make_car(make="Mahindra", model="Thar")
    bob = await make_user(email="bob@example.com", name="Bob Racer")
    alice_morning = await make_booking(camry, user, date(2026, 11, 10), "09:00", "10:00")
    alice_noon = await make_booking(camry, user, date(2026, 11, 10), "12:00", "13:00")
    bob_drive = await make_booking(
        thar, bob, date(2026, 11, 12), status=models.TestDriveStatusEnum.CONFIRMED
    )

    everything = await client.get("/api/admin/test-drives", headers=admin_headers)
    by_name = await client.get(
        "/api/admin/test-drives", params={"search": "racer"}, headers=admin_headers
    )
    by_make = await client.get(
        "/api/admin/test-drives", params={"search": "toyota"}, headers=admin_headers
    )
    confirmed = await client.get(
        "/api/admin/test-drives", params={"status": "confirmed"}, headers=admin_headers
    )

    assert [b["id"] for b in everything.json()] == [
        bob_drive.id,
        alice_morning.id,
        alice_noon.id,
    ]
    assert everything.json()[0]["user"]["email"] == "bob@example.com"
    assert [b["id"] for b in by_name.json()] == [bob_drive.id]
    assert {b["id"] for b in by_make.json()} == {alice_morning.id, alice_noon.id}
    assert [b["id"] for b in confirmed.json()] == [bob_drive.id]


async def test_update_test_drive_status(client, make_car, make_booking, user, admin_headers):
    car = await make_car()
    booking = await make_booking(car, user, date(2026, 11, 10))

    confirmed = await client.patch(
        f"/api/admin/test-drives/{booking.id}/status",
        json={"status": "CONFIRMED"},
        headers=admin_headers,
    )
    invalid = await client.patch(
        f"/api/admin/test-drives/{booking.id}/status",
        json={"status": "LOST"},
        headers=admin_headers,
    )
    missing = await client.patch(
        "/api/admin/test-drives/missing/status",
        json={"status": "COMPLETED"},
        headers=admin_headers,
    )

    assert confirmed.status_code == 200
    assert confirmed.json()["status"] == "CONFIRMED"
    assert confirmed.json()["user"]["id"] == user.id
    assert invalid.status_code == 400
    assert invalid.json()["detail"] == "Invalid status"
    assert missing.status_code == 404


async def test_dashboard_counts_and_conversion(
    client, make_car, make_booking, user, admin_headers
):
    completed = models.TestDriveStatusEnum.COMPLETED
    sold = await make_car(status=models.CarStatusEnum.SOLD)
    available = await make_car(featured=True)
    await make_car(status=models.CarStatusEnum.UNAVAILABLE)
    await make_booking(sold, user, date(2026, 10, 1), status=completed)
    await make_booking(sold, user, date(2026, 10, 2), status=completed)
    await make_booking(available, user, date(2026, 10, 3), status=completed)
    await make_booking(available, user, date(2026, 10, 4))

    response = await client.get("/api/admin/dashboard", headers=admin_headers)

    assert response.json() == {
        "cars": {"total": 3, "available": 1, "sold": 1, "unavailable": 1, "featured": 1},
        "test_drives": {
            "total": 4,
            "pending": 1,
            "confirmed": 0,
            "completed": 3,
            "cancelled": 0,
            "no_show": 0,
            "conversion_rate": 33.33,
        },
    }


async def test_dashboard_without_completed_drives(client, admin_headers):
    response = await client.get("/api/admin/dashboard", headers=admin_headers)

    assert response.json()["test_drives"]["conversion_rate"] == 0.0
    assert response.json()["cars"]["total"] == 0


async def test_dealership_defaults_and_working_hours(client, admin_headers):
    defaults = await client.get("/api/admin/settings/dealership", headers=admin_headers)
    saved = await client.put(
        "/api/admin/settings/working-hours",
        json=[
            {"day_of_week": "MONDAY", "is_open": False},
            {"day_of_week": "SATURDAY", "open_time": "10:00", "close_time": "14:00"},
        ],
        headers=admin_headers,
    )

    assert defaults.status_code == 200
    assert defaults.json()["name"] == "Vahaan Motors"
    assert len(defaults.json()["working_hours"]) == 7
    hours = {h["day_of_week"]: h for h in saved.json()["working_hours"]}
    assert len(hours) == 7
    assert hours["MONDAY"]["is_open"] is False
    assert hours["SATURDAY"]["open_time"] == "10:00"
    assert hours["SATURDAY"]["close_time"] == "14:00"
    assert hours["TUESDAY"]["open_time"] == "09:00"


async def test_working_hours_validation(client, admin_headers):
    backwards = await client.put(
        "/api/admin/settings/working-hours",
        json=[{"day_of_week": "MONDAY", "open_time": "18:00", "close_time": "09:00"}],
        headers=admin_headers,
    )
    duplicate = await client.put(
        "/api/admin/settings/working-hours",
        json=[{"day_of_week": "MONDAY"}, {"day_of_week": "MONDAY", "is_open": False}],
        headers=admin_headers,
    )

    assert backwards.status_code == 422
    assert duplicate.status_code == 400


async def test_users_and_role_changes(client, user, admin, admin_headers):
    users = await client.get("/api/admin/users", headers=admin_headers)
    promoted = await client.patch(
        f"/api/admin/users/{user.id}/role", json={"role": "ADMIN"}, headers=admin_headers
    )
    own = await client.patch(
        f"/api/admin/users/{admin.id}/role", json={"role": "USER"}, headers=admin_headers
    )
    missing = await client.patch(
        "/api/admin/users/missing/role", json={"role": "ADMIN"}, headers=admin_headers
    )

    assert {u["email"] for u in users.json()} == {"alice@example.com", "boss@example.com"}
    assert promoted.json()["role"] == "ADMIN"
    assert own.status_code == 400
    assert own.json()["detail"] == "You cannot change your own role"
    assert missing.status_code == 404


async def test_admin_searches_treat_like_wildcards_as_text(
    client, make_car, make_booking, user, admin_headers
):
    car = await make_car()
    await make_booking(car, user, date(2026, 11, 10))

    cars = await client.get("/api/admin/cars", params={"search": "%"}, headers=admin_headers)
    drives = await client.get(
        "/api/admin/test-drives", params={"search": "_"}, headers=admin_headers
    )

    assert cars.json() == []
    assert drives.json() == []


async def test_add_car_removes_stored_images_when_an_upload_fails(
    client, admin_headers, fake_storage, monkeypatch
):
    from app.services.storage_services import storage_service
    from app.utils.exception_utils import ServerErrorException

    stored = []

    async def flaky_upload(car_id, data, content_type, index):
        if stored:
            raise ServerErrorException("Failed to upload car image")
        url = f"http://blob/car-images/cars/{car_id}/image-{index}.jpeg"
        stored.append(url)
        return url

    monkeypatch.setattr(storage_service, "upload_car_image", flaky_upload)

    response = await client.post(
        "/api/admin/cars",
        data=CAR_FORM,
        files=[
            ("images", ("front.jpg", b"jpeg-bytes", "image/jpeg")),
            ("images", ("side.jpg", b"jpeg-bytes", "image/jpeg")),
        ],
        headers=admin_headers,
    )

    assert response.status_code == 500
    assert len(stored) == 1
    assert fake_storage["deleted"] == stored
    assert (await client.get("/api/admin/cars", headers=admin_headers)).json() == []


async def test_add_car_skips_svg_uploads(client, admin_headers, fake_storage):
    response = await client.post(
        "/api/admin/cars",
        data=CAR_FORM,
        files=[("images", ("logo.svg", b"<svg onload='x()'/>", "image/svg+xml"))],
        headers=admin_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "No valid images were uploaded"
    assert fake_storage["uploaded"] == []


@pytest.mark.parametrize(
    "content_type, extension",
    [
        ("image/jpeg", "jpeg"),
        ("image/jpg", "jpeg"),
        ("IMAGE/PNG", "png"),
        ("image/webp; charset=binary", "webp"),
        ("image/svg+xml", None),
        ("text/plain", None),
        (None, None),
    ],
)
def test_image_extension_accepts_raster_types_only(content_type, extension):
    from app.services.storage_services import StorageService

    assert StorageService.image_extension(content_type) == extension


def test_role_scopes():
    from app.auth.permissions import scopes_for_role

    user_scopes = scopes_for_role(models.RoleName.USER)
    admin_scopes = scopes_for_role(models.RoleName.ADMIN)

    assert user_scopes == {
        "wishlist:manage",
        "test-drives:create",
        "test-drives:read",
        "test-drives:cancel",
    }
    assert user_scopes < admin_scopes
    assert "users:manage" in admin_scopes
