"""Shared test fixtures and helpers."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENV", "test")
os.environ.setdefault("SEED_SAMPLE_GARAGES", "false")

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from garage_booking.api.routes import garages as garages_routes  # noqa: E402
from garage_booking.core.db import get_session  # noqa: E402
from garage_booking.main import app  # noqa: E402
from garage_booking.models.garage import Garage  # noqa: E402
from garage_booking.services import appointment_service  # noqa: E402

# Tuesday morning, garage-local time
FROZEN_NOW = datetime(2026, 3, 10, 9, 10)


@pytest.fixture
async def session_maker():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def session(session_maker):
    async with session_maker() as s:
        yield s


@pytest.fixture
async def client(session_maker):
    async def _override_session():
        async with session_maker() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def frozen_now(monkeypatch):
    monkeypatch.setattr(appointment_service, "garage_now", lambda: FROZEN_NOW)
    monkeypatch.setattr(garages_routes, "garage_now", lambda: FROZEN_NOW)
    return FROZEN_NOW


def make_garage(**overrides) -> Garage:
    data = {
        "name": "Garage Lac",
        "address": "Rue du Lac Biwa, Tunis",
        "latitude": 36.87,
        "longitude": 10.16,
        "opening_hour": 8,
        "closing_hour": 18,
        "is_open": True,
        "phone_number": "+216 71 000 000",
        "services": ["Oil Change", "Brake Service", "Diagnostics"],
        "rating": 4.6,
        "review_count": 40,
    }
    data.update(overrides)
    return Garage(**data)


@pytest.fixture
async def garages(session_maker) -> list[Garage]:
    """Two garages near Tunis and one in Paris."""
    rows = [
        make_garage(),
        make_garage(
            name="Garage Centre",
            address="Avenue Habib Bourguiba, Tunis",
            latitude=36.80,
            longitude=10.185,
            opening_hour=9,
            closing_hour=17,
            services=["Tire Change", "Battery Replacement"],
        ),
        make_garage(
            name="AutoFix Pro",
            address="123 Main St, Paris, France",
            latitude=48.85,
            longitude=2.35,
            services=["Oil Change", "Engine Repair"],
        ),
    ]
    async with session_maker() as s:
        s.add_all(rows)
        await s.commit()
        for g in rows:
            await s.refresh(g)
    return rows


async def register(client: AsyncClient, username: str = "amine") -> dict[str, str]:
    """Register a user and return bearer auth headers."""
    resp = await client.post(
        "/api/v1/auth/register",
        json={
            "username": username,
            "password": "s3cret-pass",
            "email": f"{username}@mail.tn",
            "fullName": username.title(),
            "documentNumber": "01234567",
        },
    )
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['accessToken']}"}


@pytest.fixture
async def auth_headers(client) -> dict[str, str]:
    return await register(client, "amine")


@pytest.fixture
async def other_auth_headers(client) -> dict[str, str]:
    return await register(client, "sarra")


def vehicle_payload(**overrides) -> dict:
    data = {
        "make": "Renault",
        "model": "Clio",
        "year": 2021,
        "licensePlate": "123 TU 4567",
        "vin": "VF1RJA00000000001",
        "chipsetCode": "CHP-001",
        "fuelType": "petrol",
        "status": "active",
    }
    data.update(overrides)
    return data


async def add_vehicle(client: AsyncClient, headers: dict[str, str], **overrides) -> dict:
    resp = await client.post("/api/v1/vehicles", json=vehicle_payload(**overrides), headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
