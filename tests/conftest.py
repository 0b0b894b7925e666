"""Shared fixtures.

Every test gets a fresh app bound to its own in-memory SQLite engine, with a
bootstrap admin account created by the lifespan handler.
"""
import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app

ADMIN_EMAIL = "admin@courses.io"
ADMIN_PASSWORD = "admin-secret"
JWT_SECRET = "test-secret-for-signing-tokens"


@pytest.fixture
def settings() -> Settings:
    return Settings(
        APP_ENV="test",
        DATABASE_URL="sqlite://",
        JWT_SECRET=JWT_SECRET,
        BOOTSTRAP_ADMIN_EMAIL=ADMIN_EMAIL,
        BOOTSTRAP_ADMIN_PASSWORD=ADMIN_PASSWORD,
        STRIPE_SECRET_KEY="sk_test_dummy",
        RATE_LIMIT_MAX_REQUESTS=1000,
        _env_file=None,
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_service(client):
    return client.app.state.auth_service


@pytest.fixture
def cart_service(client):
    return client.app.state.cart_service


def register(client: TestClient, email: str, password: str = "secret1", **extra) -> dict:
    body = {"email": email, "password": password, "firstName": "Test", "lastName": "User"}
    body.update(extra)
    resp = client.post("/api/auth/register", json=body)
    assert resp.status_code == 201, resp.text
    return resp.json()


def login(client: TestClient, email: str, password: str) -> dict:
    resp = client.post("/api/auth/login", json={"email": email, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_token(client) -> str:
    return login(client, ADMIN_EMAIL, ADMIN_PASSWORD)["token"]


@pytest.fixture
def user_token(client) -> str:
    return register(client, "student@courses.io")["token"]
