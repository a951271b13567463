"""
Shared fixtures: a fresh SQLite database per test, the real app wired to it,
and logged-in callers for each role.
"""

import os
import tempfile

# Settings are read once at import time, so configure before importing the app.
_IMPORT_DB_DIR = tempfile.mkdtemp(prefix="bizportal-tests-")
os.environ.setdefault("PORTAL_DATABASE_URL", f"sqlite+aiosqlite:///{_IMPORT_DB_DIR}/import.db")
os.environ.setdefault("PORTAL_BCRYPT_ROUNDS", "4")
os.environ.setdefault("PORTAL_LOG_LEVEL", "warning")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from bizportal.core.config import get_settings
from bizportal.core.database import get_session, init_db
from bizportal.main import app
from bizportal.services.users import ensure_ceo

CEO_EMAIL = "ceo@company.com"
CEO_PASSWORD = "CEO@123456"
PASSWORD = "Secret@123"


@pytest.fixture
async def db(tmp_path):
    """Session factory bound to a fresh database with the CEO bootstrapped."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'portal.db'}")
    await init_db(engine)
    factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await ensure_ceo(session, get_settings())
        await session.commit()
    yield factory
    await engine.dispose()


@pytest.fixture
async def session(db):
    async with db() as s:
        yield s


@pytest.fixture
async def client(db):
    async def _get_test_session():
        async with db() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _get_test_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    async def _login(email: str, password: str) -> dict:
        resp = await client.post("/api/auth/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return {"Authorization": f"Bearer {resp.json()['token']}"}

    return _login


@pytest.fixture
async def ceo_headers(login):
    return await login(CEO_EMAIL, CEO_PASSWORD)


@pytest.fixture
def make_employee(client, ceo_headers):
    async def _make(name: str, email: str, **extra) -> dict:
        body = {"name": name, "email": email, "password": PASSWORD, **extra}
        resp = await client.post("/api/ceo/employees", json=body, headers=ceo_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_client(client, ceo_headers):
    async def _make(name: str, email: str) -> dict:
        body = {
            "name": name,
            "email": email,
            "password": PASSWORD,
            "companyDetails": {
                "name": f"{name} Ltd",
                "address": "1 Main Street",
                "phone": "+1-555-0100",
            },
        }
        resp = await client.post("/api/ceo/clients", json=body, headers=ceo_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def make_project(client, ceo_headers):
    async def _make(client_id: str, employees=(), **extra) -> dict:
        body = {
            "name": "Portal Rollout",
            "description": "Internal portal rollout",
            "clientId": client_id,
            "startDate": "2024-01-01",
            "endDate": "2024-03-31",
            "budget": 1000,
            "assignedEmployees": [
                {"employee": emp_id, "role": "developer"} for emp_id in employees
            ],
            **extra,
        }
        resp = await client.post("/api/ceo/projects", json=body, headers=ceo_headers)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
async def acme(make_client):
    return await make_client("Acme", "acme@clients.com")


@pytest.fixture
async def alice(make_employee):
    return await make_employee(
        "Alice", "alice@company.com", department="Engineering", position="Developer"
    )


@pytest.fixture
async def alice_headers(login, alice):
    return await login("alice@company.com", PASSWORD)


@pytest.fixture
async def acme_headers(login, acme):
    return await login("acme@clients.com", PASSWORD)


@pytest.fixture
async def project(make_project, acme, alice):
    return await make_project(acme["id"], employees=[alice["id"]])
