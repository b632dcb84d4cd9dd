from datetime import datetime, timezone

from app import models


async def test_toggle_adds_then_removes(client, make_car, user_headers):
    car = await make_car()

    added = await client.post(f"/api/saved-cars/{car.id}", headers=user_headers)
    saved = await client.get("/api/saved-cars", headers=user_headers)
    removed = await client.post(f"/api/saved-cars/{car.id}", headers=user_headers)
    after = await client.get("/api/saved-cars", headers=user_headers)

    assert added.status_code == 200
    assert added.json() == {"saved": True, "message": "Car added to favorites"}
    assert [c["id"] for c in saved.json()] == [car.id]
    assert saved.json()[0]["wishlisted"] is True
    assert removed.json() == {"saved": False, "message": "Car removed from favorites"}
    assert after.json() == []


async def test_toggle_unknown_car_is_404(client, user_headers):
    response = await client.post("/api/saved-cars/missing", headers=user_headers)

    assert response.status_code == 404


async def test_wishlist_requires_login(client, make_car):
    car = await make_car()

    toggle = await client.post(f"/api/saved-cars/{car.id}")
    listing = await client.get("/api/saved-cars")

    assert toggle.status_code == 401
    assert listing.status_code == 401


async def test_saved_cars_most_recent_first(client, db, make_car, user, user_headers):
    older = await make_car(model="Corolla")
    newer = await make_car(model="Supra")
    db.add_all(
        [
            models.UserSavedCar(
                user_id=user.id,
                car_id=older.id,
                saved_at=datetime(2026, 3, 1, tzinfo=timezone.utc),
            ),
            models.UserSavedCar(
                user_id=user.id,
                car_id=newer.id,
                saved_at=datetime(2026, 3, 2, tzinfo=timezone.utc),
            ),
        ]
    )
    await db.commit()

    response = await client.get("/api/saved-cars", headers=user_headers)

    assert [c["id"] for c in response.json()] == [newer.id, older.id]


async def test_wishlists_are_per_user(client, make_car, make_user, user_headers, headers_for):
    car = await make_car()
    other = await make_user(email="bob@example.com")

    await client.post(f"/api/saved-cars/{car.id}", headers=user_headers)
    response = await client.get("/api/saved-cars", headers=headers_for(other))

    assert response.json() == []
