"""Shared fixtures: an in-memory SQLite store, a demo user and an API client."""

from datetime import datetime

import httpx
import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from components.core.database import Base, DatabaseManager
from components.core.identity import StaticIdentityProvider, get_identity_provider
from components.core.init_db import get_db
from components.ledger.coordinator import LedgerCoordinator
from components.user.repository import UserRepository
from components.user.schemas import UserCreate
from restapi.router import create_app

# Every budget window in coordinator tests is computed around this instant
NOW = datetime(2024, 3, 20, 14, 30)


@pytest.fixture
async def engine():
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_manager(engine):
    return DatabaseManager(engine)


@pytest.fixture
async def session(db_manager):
    async with db_manager.get_db() as session:
        yield session


@pytest.fixture
async def user_id(db_manager):
    async with db_manager.get_db() as session:
        user = await UserRepository(session).create(
            UserCreate(name="Test User", email="user@example.com", password="secret123")
        )
        return user.id


@pytest.fixture
async def other_user_id(db_manager):
    async with db_manager.get_db() as session:
        user = await UserRepository(session).create(
            UserCreate(name="Other User", email="other@example.com", password="secret123")
        )
        return user.id


@pytest.fixture
def ledger(session):
    return LedgerCoordinator(session, now=NOW)


@pytest.fixture
def app(db_manager, user_id):
    app = create_app()

    async def override_get_db():
        async with db_manager.get_db() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_identity_provider] = lambda: StaticIdentityProvider(user_id)
    return app


@pytest.fixture
async def client(app):
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
