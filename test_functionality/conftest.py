"""
Shared fixtures.

Every test gets its own SQLite file under tmp_path, so tests never see
each other's data. Service tests use the `factory` fixture; HTTP tests
use `client` (FastAPI TestClient, lifespan included) and `api`, a small
helper that registers accounts and returns their bearer headers.
"""
import os
import sys

import pytest
from fastapi.testclient import TestClient

src_path = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from messhub.adapters.rest.app import create_app
from messhub.adapters.rest.dependencies import get_factory
from messhub.factory import ServiceFactory
from messhub.infrastructure.config import Settings

PASSWORD = "secret123"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        environment="test",
        db_path=str(tmp_path / "messhub-test.db"),
        jwt_secret="test-secret",
        log_level="DEBUG",
    )


@pytest.fixture
async def factory(settings):
    factory = ServiceFactory(settings)
    await factory.initialize()
    return factory


class Builder:
    """Creates accounts, messes, meals and orders with valid defaults."""

    def __init__(self, factory: ServiceFactory):
        self.factory = factory
        self._seq = 0

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    async def account(self, role="CUSTOMER", name=None, email=None):
        n = self._next()
        result = await self.factory.create_authentication_service().register({
            "name": name or f"{role.title()} {n}",
            "email": email or f"{role.lower()}{n}@example.com",
            "password": PASSWORD,
            "role": role,
        })
        return result.account

    async def mess(self, owner_id, **overrides):
        fields = {
            "name": f"Mess {self._next()}",
            "area": "Koramangala",
            "phone": "9876543210",
            "address": "12 Main Road, Bengaluru",
            "description": "Fresh home-style food every day.",
        }
        fields.update(overrides)
        return await self.factory.create_mess_service().create(owner_id, fields)

    async def meal(self, mess_id, **overrides):
        fields = {
            "name": f"Meal {self._next()}",
            "meal_type": "lunch",
            "is_veg": True,
            "description": "Rice, dal and two vegetables.",
            "price": 100,
        }
        fields.update(overrides)
        return await self.factory.create_meal_service().create(mess_id, fields)

    async def order(self, customer_id, lines, service=None):
        service = service or self.factory.create_order_service()
        return await service.create(customer_id, place_request(lines))


def place_request(lines, **overrides) -> dict:
    """lines: iterable of (meal_id, quantity, price)."""
    fields = {
        "items": [{"meal_id": m, "quantity": q, "price": p} for m, q, p in lines],
        "delivery_address": "221B Baker Street, Bengaluru",
        "delivery_phone": "9123456780",
        "payment_method": "UPI",
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def build(factory):
    return Builder(factory)


# --- HTTP ---

@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


class Api:
    """Registers accounts over HTTP and hands back bearer headers.

    The auth cookie set by register/login is dropped right away so that
    requests only carry the identity passed in their headers.
    """

    def __init__(self, client: TestClient):
        self.client = client
        self._seq = 0

    def register(self, role="CUSTOMER", email=None):
        self._seq += 1
        resp = self.client.post("/auth/register", json={
            "name": f"{role.title()} {self._seq}",
            "email": email or f"{role.lower()}{self._seq}@example.com",
            "password": PASSWORD,
            "role": role,
        })
        assert resp.status_code == 201, resp.text
        self.client.cookies.clear()
        body = resp.json()
        return body["user"], bearer(body["token"])

    def admin_headers(self):
        # tokens are stateless: a signed ADMIN token is all the pipeline checks
        token = get_factory().create_token_service().issue(10_000, "Admin", "ADMIN")
        return bearer(token)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def api(client):
    return Api(client)
