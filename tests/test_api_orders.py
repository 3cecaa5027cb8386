import pytest
from sqlalchemy import func, select

from conftest import auth_headers, make_token
from storefront.db.models import Order


async def order_count(session_factory) -> int:
    async with session_factory() as session:
        result = await session.execute(select(func.count(Order.id)))
        return result.scalar()


@pytest.mark.asyncio
async def test_create_order_requires_authentication(api_client, catalog, session_factory):
    payload = {"address": "12 Main St", "items": [{"productId": catalog["tomato"].id, "quantity": 1}]}

    response = await api_client.post("/api/orders", json=payload)
    assert response.status_code == 401

    response = await api_client.post(
        "/api/orders", json=payload, headers={"Authorization": "Bearer not-a-token"}
    )
    assert response.status_code == 401

    assert await order_count(session_factory) == 0


@pytest.mark.asyncio
async def test_create_order(api_client, catalog):
    response = await api_client.post(
        "/api/orders",
        json={
            "address": "12 Main St",
            "items": [
                {"productId": catalog["tomato"].id, "quantity": 2, "price": 1},
                {"productId": catalog["milk"].id, "quantity": 1},
            ],
        },
        headers=auth_headers("u1"),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["totalAmount"] == 110
    assert body["status"] == "pending"
    assert body["userId"] == "u1"
    assert body["address"] == "12 Main St"
    assert "createdAt" in body
    assert "items" not in body


@pytest.mark.parametrize("payload", [
    {"address": "", "items": [{"productId": 1, "quantity": 1}]},
    {"address": "12 Main St", "items": []},
    {"address": "12 Main St", "items": [{"productId": 1, "quantity": 0}]},
    {"address": "12 Main St", "items": [{"productId": 1, "quantity": 10**20}]},
    {"address": "12 Main St"},
])
@pytest.mark.asyncio
async def test_create_order_invalid_input(api_client, catalog, session_factory, payload):
    response = await api_client.post("/api/orders", json=payload, headers=auth_headers())

    assert response.status_code == 400
    assert response.json()["detail"]
    assert await order_count(session_factory) == 0


@pytest.mark.asyncio
async def test_create_order_reject_policy(api_client, catalog, session_factory, monkeypatch):
    from storefront.core.config import settings
    monkeypatch.setattr(settings, "UNKNOWN_PRODUCT_POLICY", "reject")

    response = await api_client.post(
        "/api/orders",
        json={"address": "12 Main St", "items": [{"productId": 9999, "quantity": 1}]},
        headers=auth_headers(),
    )

    assert response.status_code == 400
    assert response.json() == {"detail": "Product 9999 not available"}
    assert await order_count(session_factory) == 0


@pytest.mark.asyncio
async def test_order_listing_and_ownership(api_client, catalog):
    created = []
    for product in ("milk", "tomato"):
        response = await api_client.post(
            "/api/orders",
            json={"address": "12 Main St", "items": [{"productId": catalog[product].id, "quantity": 1}]},
            headers=auth_headers("u1"),
        )
        created.append(response.json()["id"])

    response = await api_client.get("/api/orders", headers=auth_headers("u1"))
    assert response.status_code == 200
    assert [o["id"] for o in response.json()] == list(reversed(created))

    response = await api_client.get("/api/orders", headers=auth_headers("u2"))
    assert response.json() == []

    response = await api_client.get(f"/api/orders/{created[0]}", headers=auth_headers("u1"))
    assert response.status_code == 200
    assert response.json()["totalAmount"] == 30

    response = await api_client.get(f"/api/orders/{created[0]}", headers=auth_headers("u2"))
    assert response.status_code == 403

    response = await api_client.get("/api/orders/9999", headers=auth_headers("u1"))
    assert response.status_code == 404

    response = await api_client.get(f"/api/orders/{created[0]}")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_order_items_keep_price_snapshot(api_client, catalog, db_session):
    response = await api_client.post(
        "/api/orders",
        json={"address": "12 Main St", "items": [{"productId": catalog["tomato"].id, "quantity": 2}]},
        headers=auth_headers("u1"),
    )
    order_id = response.json()["id"]

    catalog["tomato"].price = 75
    await db_session.commit()

    response = await api_client.get(f"/api/orders/{order_id}/items", headers=auth_headers("u1"))
    assert response.status_code == 200
    assert response.json() == [{
        "id": response.json()[0]["id"],
        "orderId": order_id,
        "productId": catalog["tomato"].id,
        "quantity": 2,
        "price": 40,
    }]

    response = await api_client.get(f"/api/orders/{order_id}/items", headers=auth_headers("u2"))
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_current_user(api_client):
    response = await api_client.get("/api/user")
    assert response.status_code == 200
    assert response.json() is None

    token = make_token("u1", email="asha@example.com", first_name="Asha")
    response = await api_client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
    body = response.json()
    assert body["id"] == "u1"
    assert body["email"] == "asha@example.com"
    assert body["firstName"] == "Asha"

    token = make_token("u1", email="asha@example.com", first_name="Asha", last_name="Rao")
    response = await api_client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
    assert response.json()["lastName"] == "Rao"


@pytest.mark.asyncio
async def test_health(api_client):
    response = await api_client.get("/health")
    assert response.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_current_user_shared_email(api_client):
    for subject_id in ("u1", "u2"):
        token = make_token(subject_id, email="family@example.com")
        response = await api_client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200
        assert response.json()["id"] == subject_id

    token = make_token("u1", email="asha@example.com")
    response = await api_client.get("/api/user", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["email"] == "asha@example.com"
