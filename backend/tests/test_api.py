from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from storefront.core.db import get_db
from storefront.main import app


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    assert client.get("/").json() == {"status": "ok"}


def test_create_and_fetch_category(client):
    res = client.post("/categories", json={"name": "Mugs", "description": "Stoneware"})
    assert res.status_code == 201
    body = res.json()
    assert body["slug"] == "mugs"

    assert client.get("/categories/mugs").json()["id"] == body["id"]
    assert client.get(f"/categories/{body['id']}").json()["name"] == "Mugs"
    assert client.get("/categories/nothing").status_code == 404


def test_invalid_category_returns_field_errors(client):
    res = client.post("/categories", json={"name": "Mugs"})
    assert res.status_code == 422
    assert res.json()["errors"] == {"description": ["can't be blank"]}


def test_sku_lifecycle(client, product, attribute_type):
    payload = {
        "product_id": product.id,
        "attribute_type_id": attribute_type.id,
        "price": "18.00",
        "cost_value": "6.50",
        "stock": 20,
        "stock_warning_level": 5,
        "length": "30",
        "weight": "180",
        "thickness": "2",
    }
    ids = []
    for value in ("S", "M"):
        res = client.post("/skus", json={**payload, "attribute_value": value})
        assert res.status_code == 201
        ids.append(res.json()["id"])
    assert res.json()["sku"] == "TEE-M"

    listed = client.get(f"/products/{product.id}/skus").json()
    assert [s["attribute_value"] for s in listed] == ["S", "M"]

    res = client.delete(f"/skus/{ids[0]}")
    assert res.status_code == 422
    assert res.json()["errors"]["base"] == ["You must have at least 2 SKUs per product."]


def test_sku_stock_below_warning_level_rejected(client, product, attribute_type):
    res = client.post("/skus", json={
        "product_id": product.id,
        "attribute_type_id": attribute_type.id,
        "attribute_value": "S",
        "price": "18.00",
        "cost_value": "6.50",
        "stock": 5,
        "stock_warning_level": 5,
        "length": "30",
        "weight": "180",
        "thickness": "2",
    })
    assert res.status_code == 422
    assert "sku" in res.json()["errors"]


def test_delivery_price_delete_conflict(client, delivery_price, order):
    res = client.delete(f"/delivery-prices/{delivery_price.id}")
    assert res.status_code == 409


def test_delivery_prices_for_parcel(client, delivery_price):
    res = client.get("/delivery-prices/for-parcel", params={"weight": 100, "length": 20, "thickness": 1})
    assert [p["code"] for p in res.json()] == ["RM1"]


def test_checkout_flow(client, make_sku, delivery_price):
    sku = make_sku()
    cart = client.post("/carts").json()
    cart = client.post(f"/carts/{cart['id']}/items", json={"sku_id": sku.id, "quantity": 2}).json()
    assert Decimal(cart["total_price"]) == Decimal("36.00")

    res = client.post("/orders", json={"email": "test@test", "delivery_id": delivery_price.id, "terms": True})
    assert res.status_code == 422
    assert res.json()["detail"][0]["loc"] == ["body", "email"]

    order = client.post("/orders", json={
        "email": "test@test.com",
        "delivery_id": delivery_price.id,
        "terms": True,
        "delivery_address": {"first_name": "Jane", "city": "Bristol"},
    }).json()

    res = client.post(f"/orders/{order['id']}/transfer", json={"cart_id": cart["id"]})
    assert len(res.json()["order_items"]) == 1

    res = client.post(f"/orders/{order['id']}/calculate", json={"cart_id": cart["id"], "tax_rate": "0.2"})
    body = res.json()
    assert Decimal(body["net_amount"]) == Decimal("36.00")
    assert Decimal(body["tax_amount"]) == Decimal("8.20")
    assert Decimal(body["gross_amount"]) == Decimal("49.20")
    assert body["is_completed"] is False

    assert client.get("/orders/active").json() == []
    res = client.post(f"/orders/{order['id']}/transactions", json={"payment_status": "Completed"})
    assert res.json()["completed"] is True
    assert [o["id"] for o in client.get("/orders/active").json()] == [order["id"]]

    res = client.post(f"/orders/{order['id']}/dispatch", json={
        "consignment_number": "RM1GB",
        "actual_shipping_cost": "4.20",
    })
    assert res.json()["shipping_status"] == "dispatched"


def test_missing_order_is_404(client):
    assert client.get("/orders/999").status_code == 404


def test_order_with_unknown_delivery_rejected(client, delivery_price):
    res = client.post("/orders", json={"email": "test@test.com", "delivery_id": 999, "terms": True})
    assert res.status_code == 422
    assert res.json()["errors"]["delivery_id"] == ["Delivery option must be selected."]


def test_stock_notification_requires_valid_email(client, make_sku):
    sku = make_sku()
    res = client.post(f"/skus/{sku.id}/notifications", json={"email": "not-an-email"})
    assert res.status_code == 422

    res = client.post(f"/skus/{sku.id}/notifications", json={"email": "fan@example.com"})
    assert res.status_code == 201
