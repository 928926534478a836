from jose import jwt

from services.product_service.service import ProductService
from shared.config import settings
from shared.security.jwt_handler import ALGORITHM, SECRET_KEY

from payloads import order_payload


def login(client, username="admin", password="admin123"):
    return client.post("/admin/login", json={"username": username, "password": password})


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_requests_without_app_key_are_rejected(anonymous_client):
    resp = anonymous_client.get("/products")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Missing or invalid authorization header"}


def test_requests_with_wrong_app_key_are_rejected(anonymous_client):
    resp = anonymous_client.get("/health", headers={"Authorization": "Bearer wrong"})
    assert resp.status_code == 401


def test_cors_preflight_allows_any_origin(anonymous_client):
    resp = anonymous_client.options(
        "/products",
        headers={
            "Origin": "https://shop.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization, Content-Type",
        },
    )
    assert resp.status_code == 200
    assert resp.headers["access-control-allow-origin"] == "*"
    assert resp.headers["access-control-max-age"] == "600"


def test_unexpected_error_is_500_with_cors_headers(client, monkeypatch):
    async def broken_list(db, active_only=False):
        raise RuntimeError("boom")

    monkeypatch.setattr(ProductService, "list_products", broken_list)
    resp = client.get("/products", headers={"Origin": "https://shop.example"})

    assert resp.status_code == 500
    assert resp.json() == {"error": "Internal server error"}
    assert resp.headers["access-control-allow-origin"] == "*"


def test_first_login_seeds_default_credentials(client, kv_get):
    assert kv_get("admin:credentials") is None

    resp = login(client)
    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["message"] == "Login successful"
    assert body["token"]
    assert body["expiresAt"]

    assert kv_get("admin:credentials") == {"username": "admin", "password": "admin123"}


def test_login_is_repeatable(client):
    assert login(client).status_code == 200
    assert login(client).status_code == 200


def test_wrong_password_on_fresh_store_still_seeds(client, kv_get):
    resp = login(client, password="guess")
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "message": "Invalid credentials"}

    assert kv_get("admin:credentials") is not None
    assert login(client).status_code == 200


def test_credentials_are_case_sensitive(client):
    login(client)
    assert login(client, username="Admin").status_code == 401
    assert login(client, password="ADMIN123").status_code == 401


def test_login_token_identifies_admin(client):
    token = login(client).json()["token"]
    payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    assert payload["sub"] == "admin:admin"


def test_login_with_malformed_body(client):
    resp = client.post("/admin/login", json={"username": "admin"})
    assert resp.status_code == 400


def test_admin_routes_open_when_sessions_not_required(client):
    assert client.get("/orders").status_code == 200


def test_admin_routes_require_session_when_enabled(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_SESSION_REQUIRED", True)

    resp = client.get("/orders")
    assert resp.status_code == 401
    assert resp.json() == {"error": "Admin session required"}

    bad = client.get("/orders", headers={"X-Admin-Session": "not-a-token"})
    assert bad.status_code == 401

    token = login(client).json()["token"]
    assert client.get("/orders", headers={"X-Admin-Session": token}).status_code == 200

    # The public catalog and order form keep working without a session
    assert client.get("/products").status_code == 200
    assert client.post("/orders", json=order_payload()).status_code == 201
    assert client.post("/products", json={"name": "X", "price": 1}).status_code == 401


def test_metrics_are_exposed(client):
    resp = client.get("/metrics")
    assert resp.status_code == 200
    assert "doodle_orders_created_total" in resp.text
