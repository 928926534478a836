import pytest

from shared.timestamps import parse_iso

from payloads import order_payload


def test_create_order_keeps_client_total(client):
    resp = client.post("/orders", json=order_payload(quantity=3, productPrice=20, totalPrice=60))
    assert resp.status_code == 201
    order = resp.json()["order"]

    assert order["id"]
    assert order["createdAt"]
    assert order["quantity"] == 3
    assert order["totalPrice"] == 60
    assert order["productName"] == "Sunflower Mug"


def test_total_is_not_recomputed(client):
    order = client.post("/orders", json=order_payload(quantity=2, productPrice=20, totalPrice=5)).json()["order"]
    assert order["totalPrice"] == 5


def test_missing_quantity_is_not_filled_in(client):
    payload = order_payload()
    del payload["quantity"]
    order = client.post("/orders", json=payload).json()["order"]
    assert "quantity" not in order


def test_order_is_a_snapshot_of_the_product(client):
    product = client.post("/products", json={"name": "Mug", "price": 20}).json()["product"]
    client.post(
        "/orders",
        json=order_payload(productId=product["id"], productName="Mug", productPrice=20),
    )

    client.put(f"/products/{product['id']}", json={"name": "Renamed", "price": 99})

    order = client.get("/orders").json()["orders"][0]
    assert order["productName"] == "Mug"
    assert order["productPrice"] == 20


@pytest.mark.parametrize(
    "overrides",
    [
        {"customerName": ""},
        {"phoneNumber": "   "},
        {"deliveryAddress": None},
        {"quantity": 0},
        {"productPrice": "twenty"},
    ],
)
def test_order_fields_are_stored_as_sent(client, overrides):
    resp = client.post("/orders", json=order_payload(**overrides))
    assert resp.status_code == 201
    (field, value), = overrides.items()
    assert resp.json()["order"][field] == value
    assert client.get("/orders").json()["orders"][0][field] == value


def test_partial_order_is_accepted(client):
    payload = order_payload()
    del payload["productName"]
    del payload["totalPrice"]

    resp = client.post("/orders", json=payload)
    assert resp.status_code == 201
    order = resp.json()["order"]
    assert "productName" not in order
    assert "totalPrice" not in order
    assert order["customerName"] == "Rin"


def test_extra_order_fields_are_kept(client):
    order = client.post("/orders", json=order_payload(giftWrap=True)).json()["order"]
    assert order["giftWrap"] is True


def test_create_order_rejects_non_object_body(client):
    resp = client.post("/orders", json=["not", "an", "object"])
    assert resp.status_code == 400


def test_list_orders_newest_first(client):
    first = client.post("/orders", json=order_payload(customerName="First")).json()["order"]
    second = client.post("/orders", json=order_payload(customerName="Second")).json()["order"]

    resp = client.get("/orders")
    assert resp.status_code == 200
    orders = resp.json()["orders"]

    assert [o["id"] for o in orders] == [second["id"], first["id"]]
    assert parse_iso(orders[0]["createdAt"]) >= parse_iso(orders[1]["createdAt"])


def test_list_orders_empty(client):
    assert client.get("/orders").json() == {"orders": []}
