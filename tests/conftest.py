"""Shared fixtures: in-memory SQLite schema per test, users and bearer headers."""

from __future__ import annotations

import os
import uuid
from datetime import datetime, timedelta, timezone

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_EMAIL"] = ""
os.environ["ADMIN_PASSWORD"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from skybook.core.security import create_access_token, hash_password  # noqa: E402
from skybook.db.session import Base, SessionLocal, engine  # noqa: E402
from skybook.main import app  # noqa: E402
from skybook.models.audit_log import AuditLog  # noqa: E402,F401
from skybook.models.booking import Booking  # noqa: E402,F401
from skybook.models.flight import Flight  # noqa: E402,F401
from skybook.models.payment import Payment  # noqa: E402,F401
from skybook.models.user import User  # noqa: E402


@pytest.fixture(autouse=True)
def schema():
    Base.metadata.create_all(engine)
    yield
    app.dependency_overrides.clear()
    Base.metadata.drop_all(engine)


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


def make_user(db, email: str, role: str = "user", password: str = "secret123") -> User:
    u = User(
        id=str(uuid.uuid4()),
        email=email,
        name=email.split("@")[0],
        role=role,
        password_hash=hash_password(password),
        is_active=True,
    )
    db.add(u)
    db.commit()
    db.refresh(u)
    return u


def bearer(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def user(db):
    return make_user(db, "alice@example.com")


@pytest.fixture
def other_user(db):
    return make_user(db, "bob@example.com")


@pytest.fixture
def admin(db):
    return make_user(db, "admin@example.com", role="admin")


@pytest.fixture
def user_headers(user):
    return bearer(user)


@pytest.fixture
def other_headers(other_user):
    return bearer(other_user)


@pytest.fixture
def admin_headers(admin):
    return bearer(admin)


def flight_payload(**overrides) -> dict:
    departure = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(days=10)
    body = {
        "flightNumber": "SB100",
        "airline": "SkyBook Air",
        "departureCity": "Lisbon",
        "arrivalCity": "Berlin",
        "departureTime": departure.isoformat(),
        "arrivalTime": (departure + timedelta(hours=3)).isoformat(),
        "price": 200,
        "availableSeats": 2,
    }
    body.update(overrides)
    return body


def passengers(n: int) -> list[dict]:
    return [
        {"name": f"Passenger {i}", "email": f"p{i}@example.com", "passportNumber": f"P{i:07d}"}
        for i in range(n)
    ]


@pytest.fixture
def create_flight(client, admin_headers):
    def _create(**overrides) -> dict:
        res = client.post("/api/v1/flights", json=flight_payload(**overrides), headers=admin_headers)
        assert res.status_code == 201, res.json()
        return res.json()["data"]
    return _create


@pytest.fixture
def book(client):
    def _book(flight_id: str, headers: dict, n: int = 1):
        return client.post("/api/v1/bookings", json={"flight": flight_id, "passengers": passengers(n)}, headers=headers)
    return _book
