from app import models


async def test_featured_cars_are_available_and_newest_first(client, make_car):
    await make_car(featured=True, status=models.CarStatusEnum.SOLD)
    oldest = await make_car(featured=True)
    await make_car(featured=False)
    middle = await make_car(featured=True)
    newest = await make_car(featured=True)

    default = await client.get("/api/home/featured")
    limited = await client.get("/api/home/featured", params={"limit": 2})

    assert [c["id"] for c in default.json()] == [newest.id, middle.id, oldest.id]
    assert [c["id"] for c in limited.json()] == [newest.id, middle.id]


async def test_featured_cars_flag_wishlist(client, db, make_car, user, user_headers):
    car = await make_car(featured=True)
    db.add(models.UserSavedCar(user_id=user.id, car_id=car.id))
    await db.commit()

    response = await client.get("/api/home/featured", headers=user_headers)

    assert response.json()[0]["wishlisted"] is True


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
