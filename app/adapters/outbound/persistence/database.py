# app/adapters/outbound/persistence/database.py

"""Async SQLAlchemy engine, session factory and the get_db dependency."""

import logging
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.adapters.configuration.config import settings
from app.adapters.outbound.persistence.models import register_all_events

logger = logging.getLogger(__name__)

engine = create_async_engine(
    settings.DATABASE_URL,
    pool_pre_ping=True,  # Verifica a conexão antes de usar
    echo=settings.DEBUG and settings.LOG_LEVEL == "DEBUG",
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)

# Hooks de ORM (hash de senha, timestamps)
register_all_events()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Dependency to get database session."""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except BaseException:
            # inclui asyncio.CancelledError
            await session.rollback()
            raise
