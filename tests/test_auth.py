"""Tests for registration, login and identity resolution."""

import httpx
import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from components.core import init_db
from components.core.database import DatabaseManager
from components.core.identity import IdentityProvider, JWTIdentityProvider, StaticIdentityProvider
from components.core.init_db import get_db
from components.core.security import create_access_token, get_password_hash, verify_password
from restapi.router import create_app


@pytest.fixture
async def jwt_client(db_manager):
    app = create_app()

    async def override_get_db():
        async with db_manager.get_db() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


def test_password_hash_roundtrip():
    hashed = get_password_hash("secret123")
    assert verify_password("secret123", hashed)
    assert not verify_password("wrong", hashed)


async def test_register_login_and_me(jwt_client):
    response = await jwt_client.post("/auth/register", json={
        "name": "Ada", "email": "Ada@Example.com", "password": "secret123",
    })
    assert response.status_code == 201
    assert response.json()["email"] == "ada@example.com"

    response = await jwt_client.post("/auth/login", json={"email": "ada@example.com", "password": "secret123"})
    assert response.status_code == 200
    token = response.json()["accessToken"]

    response = await jwt_client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 200
    assert response.json()["name"] == "Ada"
    assert response.json()["lastLogin"] is not None


async def test_register_duplicate_email(jwt_client):
    payload = {"name": "Ada", "email": "ada@example.com", "password": "secret123"}
    await jwt_client.post("/auth/register", json=payload)

    response = await jwt_client.post("/auth/register", json=payload)
    assert response.status_code == 400


async def test_bad_credentials(jwt_client):
    await jwt_client.post("/auth/register", json={
        "name": "Ada", "email": "ada@example.com", "password": "secret123",
    })

    response = await jwt_client.post("/auth/login", json={"email": "ada@example.com", "password": "nope"})
    assert response.status_code == 401


async def test_protected_routes_need_token(jwt_client):
    assert (await jwt_client.get("/records/balance")).status_code == 401
    response = await jwt_client.get("/budgets/", headers={"Authorization": "Bearer not-a-token"})
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


async def test_jwt_provider_rejects_unknown_user(session, user_id):
    provider = JWTIdentityProvider()

    assert await provider.resolve(create_access_token({"sub": str(user_id)}), session) == user_id
    assert await provider.resolve(create_access_token({"sub": "4242"}), session) is None
    assert await provider.resolve(None, session) is None


def test_identity_provider_is_abstract():
    with pytest.raises(TypeError):
        IdentityProvider()


async def test_static_provider(session):
    assert await StaticIdentityProvider(7).resolve(None, session) == 7


async def test_health_check(jwt_client):
    response = await jwt_client.get("/health_check/")
    assert response.json() == {"service_name": "Finance Ledger API", "status": "healthy"}


async def test_profile_update(client):
    response = await client.put("/auth/profile", json={"currency": "EUR", "monthlyBudget": 2500})

    assert response.status_code == 200
    assert response.json()["currency"] == "EUR"
    assert response.json()["monthlyBudget"] == 2500
    assert (await client.get("/auth/me")).json()["email"] == "user@example.com"


async def test_change_password(jwt_client):
    token = (await jwt_client.post("/auth/register", json={
        "name": "Ada", "email": "ada@example.com", "password": "secret123",
    })).json()["accessToken"]
    headers = {"Authorization": f"Bearer {token}"}

    response = await jwt_client.put("/auth/change-password", headers=headers, json={
        "currentPassword": "wrong-one", "newPassword": "better456",
    })
    assert response.status_code == 401

    response = await jwt_client.put("/auth/change-password", headers=headers, json={
        "currentPassword": "secret123", "newPassword": "short",
    })
    assert response.status_code == 400

    response = await jwt_client.put("/auth/change-password", headers=headers, json={
        "currentPassword": "secret123", "newPassword": "better456",
    })
    assert response.json() == {"message": "Password changed successfully"}

    old = await jwt_client.post("/auth/login", json={"email": "ada@example.com", "password": "secret123"})
    new = await jwt_client.post("/auth/login", json={"email": "ada@example.com", "password": "better456"})
    assert old.status_code == 401
    assert new.status_code == 200


async def test_change_password_needs_token(jwt_client):
    response = await jwt_client.put("/auth/change-password", json={
        "currentPassword": "secret123", "newPassword": "better456",
    })
    assert response.status_code == 401


async def test_lifespan_creates_tables(monkeypatch):
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    monkeypatch.setattr(init_db, "db_manager", DatabaseManager(engine))
    app = create_app()

    async with app.router.lifespan_context(app):
        async with engine.connect() as conn:
            tables = await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names())

    assert {"users", "financial_records", "budgets"} <= set(tables)
    await engine.dispose()
