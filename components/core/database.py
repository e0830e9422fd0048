"""Core classes and mixins for DB connections"""

from contextlib import asynccontextmanager
from typing import Optional, cast
from typing import Callable, AsyncContextManager

from sqlalchemy import Column, DateTime, func, inspect
from sqlalchemy.dialects import mysql
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.orm.attributes import set_committed_value

from components.core import config

settings = config.get_settings()
Base = declarative_base()
SessionMaker = Callable[[], AsyncContextManager[AsyncSession]]

# MySQL DATETIME drops microseconds unless fsp is given; window ends rely on them
PreciseDateTime = DateTime().with_variant(mysql.DATETIME(fsp=6), "mysql")


class TimestampMixin:
    """Adds created_at / updated_at columns maintained by the database."""
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())


async def rollback_keeping_state(session: AsyncSession) -> None:
    """
    Roll back the session without expiring what is already loaded.

    A plain rollback expires every object, and an expired attribute can't be
    lazy-loaded under asyncio; the last loaded column values are put back as
    committed state instead.
    """
    loaded = []
    for obj in list(session.identity_map.values()):
        state = inspect(obj)
        values = {
            attr.key: state.dict[attr.key]
            for attr in state.mapper.column_attrs
            if attr.key in state.dict
        }
        loaded.append((obj, values))

    await session.rollback()

    for obj, values in loaded:
        for key, value in values.items():
            set_committed_value(obj, key, value)


class DatabaseManager:
    def __init__(self, engine: Optional[AsyncEngine] = None) -> None:
        """Initialize DatabaseManager with optional engine for testing."""
        self.engine = engine or self._create_engine()

    def _create_engine(self) -> AsyncEngine:
        """Create async engine for MySQL connection."""
        return create_async_engine(
            settings.async_db_url,
            echo=settings.DEBUG,
            pool_pre_ping=True,  # Enable connection health checks
            pool_size=5,
            max_overflow=10,
        )

    def get_session(self) -> SessionMaker:
        """Returns SessionMaker for database sessions."""
        if not self.engine:
            raise ValueError("Database engine wasn't initialized")

        return cast(
            SessionMaker,
            sessionmaker(
                self.engine,
                class_=AsyncSession,
                expire_on_commit=False,
                autocommit=False,
                autoflush=False,
            ),
        )

    @asynccontextmanager
    async def get_db(self) -> AsyncContextManager[AsyncSession]:
        """Get database session context manager."""
        async_session = self.get_session()
        async with async_session() as session:
            try:
                yield session
            finally:
                await session.close()

    async def create_tables(self) -> None:
        """Create all tables registered on Base."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
