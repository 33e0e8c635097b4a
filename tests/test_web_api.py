from __future__ import annotations

import json

from fastapi.testclient import TestClient

from conftest import ADMIN_USER, make_settings, product
from marketplace.adapters.outbound.in_memory_documents import InMemoryDocumentStore
from marketplace.bootstrap import build_app
from marketplace.core.ports.outbound.documents import DocumentName

CUSTOMER = {
    "customerName": "Ada Lovelace",
    "customerEmail": "ada@example.com",
    "customerPhone": "555-0100",
    "customerAddress": "12 St James's Square",
}


# ---- storefront ------------------------------------------------------------


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_list_products_is_stable_without_writes(client):
    first = client.get("/api/products")
    second = client.get("/api/products")

    assert first.status_code == 200
    assert [p["id"] for p in first.json()["items"]] == ["P1", "P2"]
    assert first.json() == second.json()
    assert set(first.json()) == {"items", "updatedAt"}


def test_get_product_and_missing_product(client):
    assert client.get("/api/products/P1").json()["price"] == 19.99

    res = client.get("/api/products/ghost")
    assert res.status_code == 404
    assert res.json() == {"error": "Not found"}


def test_checkout_scenario(client, documents):
    res = client.post(
        "/api/orders", json={**CUSTOMER, "items": [{"productId": "P1", "qty": 3}]}
    )

    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["total"] == 59.97
    assert documents.load(DocumentName.ORDERS).items[0]["id"] == body["orderId"]


def test_checkout_empty_cart_is_400(client, documents):
    res = client.post("/api/orders", json={**CUSTOMER, "items": []})

    assert res.status_code == 400
    assert res.json() == {"error": "Cart is empty"}
    assert documents.load(DocumentName.ORDERS).items == ()


def test_checkout_errors_are_distinguishable(client):
    missing = client.post(
        "/api/orders",
        json={**CUSTOMER, "customerPhone": " ", "items": [{"productId": "P1", "qty": 1}]},
    )
    bad_qty = client.post(
        "/api/orders", json={**CUSTOMER, "items": [{"productId": "P1", "qty": 0}]}
    )
    unknown = client.post(
        "/api/orders", json={**CUSTOMER, "items": [{"productId": "nope", "qty": 1}]}
    )

    assert [r.status_code for r in (missing, bad_qty, unknown)] == [400, 400, 400]
    messages = {r.json()["error"] for r in (missing, bad_qty, unknown)}
    assert len(messages) == 3
    assert "customerPhone" in missing.json()["error"]
    assert unknown.json()["error"] == "Product not found: nope"


def test_checkout_unknown_product_creates_nothing(client, documents):
    res = client.post(
        "/api/orders",
        json={
            **CUSTOMER,
            "items": [{"productId": "P1", "qty": 1}, {"productId": "nope", "qty": 1}],
        },
    )

    assert res.status_code == 400
    assert documents.load(DocumentName.ORDERS).items == ()


def test_malformed_bodies_are_400(client):
    not_json = client.post(
        "/api/orders",
        content=b"{oops",
        headers={"Content-Type": "application/json"},
    )
    wrong_type = client.post("/api/orders", json={**CUSTOMER, "items": "lots"})

    assert not_json.status_code == 400
    assert "error" in not_json.json()
    assert wrong_type.status_code == 400
    assert wrong_type.json() == {"error": "Invalid request field: items"}


def test_unknown_route_is_json_404(client):
    res = client.get("/api/nothing-here")

    assert res.status_code == 404
    assert res.json() == {"error": "Not found"}


def test_security_headers_present(client):
    res = client.get("/api/products")

    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["X-Frame-Options"] == "SAMEORIGIN"


# ---- admin -----------------------------------------------------------------


def test_login_wrong_password(client):
    res = client.post("/admin/api/login", json={"username": ADMIN_USER, "password": "no"})

    assert res.status_code == 401
    assert res.json() == {"error": "Invalid credentials"}
    assert "token" not in res.json()


def test_login_success_shape(client, admin_headers):
    assert admin_headers["Authorization"].startswith("Bearer ")


def test_admin_routes_require_token(client):
    assert client.get("/admin/api/orders").status_code == 401
    res = client.get("/admin/api/products", headers={"Authorization": "Bearer junk"})
    assert res.status_code == 401
    assert res.json() == {"error": "Invalid or expired token"}


def test_product_round_trip_through_admin_and_storefront(client, admin_headers):
    created = client.post(
        "/admin/api/products",
        headers=admin_headers,
        json={
            "name": "Prism   Smart Lamp",
            "price": 54.005,
            "logo": "https://example.com/lamp.png",
            "description": "Mood lighting.",
        },
    )

    assert created.status_code == 200
    item = created.json()["item"]
    assert item["price"] == 54.01
    assert item["name"] == "Prism Smart Lamp"
    assert client.get(f"/api/products/{item['id']}").json() == item


def test_create_product_invalid_price(client, admin_headers):
    res = client.post(
        "/admin/api/products", headers=admin_headers, json={"name": "X", "price": -1}
    )

    assert res.status_code == 400
    assert res.json() == {"error": "Invalid product field: price"}


def test_update_product_partial(client, admin_headers):
    res = client.put(
        "/admin/api/products/P2", headers=admin_headers, json={"price": "60"}
    )

    assert res.status_code == 200
    assert res.json()["item"]["price"] == 60.0
    assert res.json()["item"]["name"] == "Lamp"


def test_delete_missing_product_keeps_document(client, admin_headers, documents):
    before = client.get("/api/products").json()

    res = client.delete("/admin/api/products/ghost", headers=admin_headers)

    assert res.status_code == 404
    assert client.get("/api/products").json() == before


def test_delete_product(client, admin_headers):
    res = client.delete("/admin/api/products/P1", headers=admin_headers)

    assert res.json() == {"ok": True}
    assert client.get("/api/products/P1").status_code == 404


def test_order_status_update(client, admin_headers):
    order_id = client.post(
        "/api/orders", json={**CUSTOMER, "items": [{"productId": "P2", "qty": 1}]}
    ).json()["orderId"]

    shipped = client.put(
        f"/admin/api/orders/{order_id}/status",
        headers=admin_headers,
        json={"status": "SHIPPED"},
    )
    assert shipped.status_code == 400
    assert shipped.json() == {"error": "Invalid status"}
    orders = client.get("/admin/api/orders", headers=admin_headers).json()["items"]
    assert orders[0]["status"] == "NEW"

    ok = client.put(
        f"/admin/api/orders/{order_id}/status",
        headers=admin_headers,
        json={"status": "fulfilled"},
    )
    assert ok.status_code == 200
    assert ok.json()["item"]["status"] == "FULFILLED"
    assert "updatedAt" in ok.json()["item"]

    missing = client.put(
        "/admin/api/orders/ghost/status", headers=admin_headers, json={"status": "NEW"}
    )
    assert missing.status_code == 404


# ---- boundary --------------------------------------------------------------


def test_login_rate_limit(tmp_path):
    settings = make_settings(tmp_path, login_rate_limit_max_requests=2)
    client = TestClient(build_app(settings, documents=InMemoryDocumentStore()))
    body = {"username": "x", "password": "y"}

    codes = [client.post("/admin/api/login", json=body).status_code for _ in range(3)]

    assert codes == [401, 401, 429]
    limited = client.post("/admin/api/login", json=body)
    assert limited.json() == {"error": "Too many requests"}
    assert int(limited.headers["Retry-After"]) > 0


def test_general_rate_limit(tmp_path):
    settings = make_settings(tmp_path, rate_limit_max_requests=3)
    client = TestClient(build_app(settings, documents=InMemoryDocumentStore()))

    codes = [client.get("/api/products").status_code for _ in range(4)]

    assert codes == [200, 200, 200, 429]


def test_oversized_body_is_rejected(tmp_path):
    settings = make_settings(tmp_path, max_body_bytes=64)
    client = TestClient(build_app(settings, documents=InMemoryDocumentStore()))

    res = client.post(
        "/api/orders",
        content=json.dumps({**CUSTOMER, "items": []}).encode(),
        headers={"Content-Type": "application/json"},
    )

    assert res.status_code == 413


def test_startup_seeds_demo_catalog_on_disk(tmp_path):
    settings = make_settings(tmp_path / "data", seed_demo_products=True)
    client = TestClient(build_app(settings))

    names = [p["name"] for p in client.get("/api/products").json()["items"]]

    assert names == ["Aurora Headphones", "Nebula Keyboard", "Prism Smart Lamp"]
    assert (tmp_path / "data" / "orders.json").exists()


class _BrokenDocumentStore(InMemoryDocumentStore):
    broken: bool = False

    def load(self, name):
        if self.broken:
            raise RuntimeError("disk on fire")
        return super().load(name)


def test_unexpected_error_is_json_500_with_security_headers(tmp_path):
    documents = _BrokenDocumentStore()
    client = TestClient(
        build_app(make_settings(tmp_path), documents=documents),
        raise_server_exceptions=False,
    )
    documents.broken = True

    res = client.get("/api/products")

    assert res.status_code == 500
    assert res.json() == {"error": "Internal server error"}
    assert res.headers["X-Content-Type-Options"] == "nosniff"
    assert res.headers["X-Frame-Options"] == "SAMEORIGIN"


def test_checkout_with_large_price_and_quantity(tmp_path):
    documents = InMemoryDocumentStore()
    documents.save(DocumentName.PRODUCTS, [product("BIG", "Yacht", "1e25")])
    client = TestClient(build_app(make_settings(tmp_path), documents=documents))

    res = client.post(
        "/api/orders", json={**CUSTOMER, "items": [{"productId": "BIG", "qty": 10}]}
    )

    assert res.status_code == 200
    assert res.json()["total"] == 1e26


def test_checkout_total_beyond_json_numbers_is_400(tmp_path):
    documents = InMemoryDocumentStore()
    documents.save(DocumentName.PRODUCTS, [product("MAX", "Everything", "1e308")])
    client = TestClient(build_app(make_settings(tmp_path), documents=documents))

    res = client.post(
        "/api/orders", json={**CUSTOMER, "items": [{"productId": "MAX", "qty": 999}]}
    )

    assert res.status_code == 400
    assert res.json() == {"error": "Order total is out of range"}
