"""Database initialization and dependency injection."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, AsyncIterator

import fastapi
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.database import DatabaseManager
# Import all models to ensure they're registered
import components.user.models
import components.record.models
import components.budget.models

# Create a single instance of DatabaseManager
db_manager = DatabaseManager()

async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for getting database sessions."""
    async with db_manager.get_db() as session:
        yield session

def init_db(app: fastapi.FastAPI) -> None:
    """Initialize database connection."""
    app.dependency_overrides[AsyncSession] = get_db


@asynccontextmanager
async def lifespan(app: fastapi.FastAPI) -> AsyncIterator[None]:
    """Create missing tables before the app starts serving."""
    await db_manager.create_tables()
    yield
