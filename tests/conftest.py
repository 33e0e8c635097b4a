from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from marketplace.adapters.outbound.bcrypt_credentials import hash_secret
from marketplace.adapters.outbound.in_memory_documents import InMemoryDocumentStore
from marketplace.adapters.outbound.logging_events import LoggingEventPublisher
from marketplace.bootstrap import build_app
from marketplace.config import Settings
from marketplace.core.domain.model.money import Money
from marketplace.core.domain.model.product import Product, ProductId
from marketplace.core.ports.outbound.documents import DocumentName

ADMIN_USER = "admin"
ADMIN_PASSWORD = "correct horse battery staple"
JWT_SECRET = "test-secret-0123456789abcdef0123456789abcdef"

# cheap rounds keep the suite fast
_USER_HASH = hash_secret(ADMIN_USER, rounds=4)
_PASSWORD_HASH = hash_secret(ADMIN_PASSWORD, rounds=4)


def make_settings(data_dir: Path, **overrides) -> Settings:
    values = dict(
        data_dir=data_dir,
        jwt_secret=JWT_SECRET,
        admin_username_hash=_USER_HASH,
        admin_password_hash=_PASSWORD_HASH,
        seed_demo_products=False,
    )
    values.update(overrides)
    return Settings(_env_file=None, **values)


def product(product_id: str, name: str, price: str) -> dict:
    return Product(
        product_id=ProductId(product_id),
        name=name,
        price=Money.of(price),
        logo="https://example.com/logo.png",
        description=f"{name} description",
    ).to_dict()


@pytest.fixture
def documents() -> InMemoryDocumentStore:
    store = InMemoryDocumentStore()
    store.save(
        DocumentName.PRODUCTS,
        [product("P1", "Aurora Headphones", "19.99"), product("P2", "Lamp", "54.00")],
    )
    store.save(DocumentName.ORDERS, [])
    return store


@pytest.fixture
def events() -> LoggingEventPublisher:
    return LoggingEventPublisher()


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path / "data")


@pytest.fixture
def client(settings: Settings, documents: InMemoryDocumentStore) -> TestClient:
    return TestClient(build_app(settings, documents=documents))


@pytest.fixture
def admin_headers(client: TestClient) -> dict[str, str]:
    res = client.post(
        "/admin/api/login", json={"username": ADMIN_USER, "password": ADMIN_PASSWORD}
    )
    assert res.status_code == 200
    return {"Authorization": f"Bearer {res.json()['token']}"}
