# app/adapters/outbound/persistence/repositories/token_repository.py (async version)

"""
Repository for the token blacklist table.

Rows hold the SHA-256 of a revoked token, never the token itself. Duplicate
inserts are absorbed by the unique constraint on ``token_hash``
(ON CONFLICT DO NOTHING), so concurrent logouts need no application lock.
"""

import logging
from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy.future import select
from sqlalchemy.exc import SQLAlchemyError

from app.adapters.outbound.persistence.models.token_blacklist_model import TokenBlacklist
from app.application.ports.outbound import ITokenBlacklistRepository
from app.domain.exceptions import DatabaseOperationException
from app.shared.utils.datetime_utils import DateTimeUtil

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


class AsyncTokenRepository(ITokenBlacklistRepository):
    """Repository for managing token blacklist."""

    @staticmethod
    async def add_to_blacklist(db: AsyncSession, token_hash: str, expires_at: datetime) -> None:
        """
        Add a token fingerprint to the blacklist. Adding the same hash twice is a no-op.

        Args:
            db: Async database session
            token_hash: SHA-256 hex of the raw token
            expires_at: When the token naturally expires
        """
        dialect = db.get_bind().dialect.name
        insert = _UPSERT_DIALECTS.get(dialect)
        if insert is None:
            raise DatabaseOperationException(message=f"Blacklist upsert not supported on dialect '{dialect}'")

        values = {
            "token_hash": token_hash,
            "expires_at": DateTimeUtil.for_storage(expires_at),
            "created_at": DateTimeUtil.for_storage(),
        }
        try:
            stmt = insert(TokenBlacklist).values(**values).on_conflict_do_nothing(
                index_elements=[TokenBlacklist.token_hash]
            )
            await db.execute(stmt)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise DatabaseOperationException(
                message="Error adding token to blacklist",
                original_error=e
            )

    @staticmethod
    async def is_blacklisted(db: AsyncSession, token_hash: str) -> bool:
        """
        Check if a token fingerprint is in the blacklist.

        Raises:
            DatabaseOperationException: If the check itself cannot be performed
        """
        try:
            query = select(TokenBlacklist.id).where(TokenBlacklist.token_hash == token_hash).limit(1)
            result = await db.execute(query)
            return result.scalar_one_or_none() is not None
        except SQLAlchemyError as e:
            await db.rollback()
            raise DatabaseOperationException(
                message="Error checking token blacklist",
                original_error=e
            )

    @staticmethod
    async def cleanup_expired(db: AsyncSession) -> int:
        """
        Remove rows whose expiry has passed; rows expiring now or later are kept.

        Returns:
            Number of records deleted
        """
        try:
            now = DateTimeUtil.for_storage()
            result = await db.execute(delete(TokenBlacklist).where(TokenBlacklist.expires_at < now))
            await db.commit()
            return result.rowcount or 0
        except SQLAlchemyError as e:
            await db.rollback()
            raise DatabaseOperationException(
                message="Error cleaning up expired blacklisted tokens",
                original_error=e
            )

    @staticmethod
    async def initialize_table(engine: AsyncEngine) -> None:
        """
        Create the blacklist table and its indexes if absent.

        Each index is created on its own, so one that already exists (or fails
        for another reason) does not stop the others.
        """
        table = TokenBlacklist.__table__
        async with engine.begin() as conn:
            await conn.run_sync(lambda sync_conn: table.create(sync_conn, checkfirst=True))

        for index in table.indexes:
            try:
                async with engine.begin() as conn:
                    await conn.run_sync(lambda sync_conn: index.create(sync_conn, checkfirst=True))
            except SQLAlchemyError as e:
                logger.warning(f"Could not create index {index.name}: {e}")

        logger.info("Token blacklist table initialized")


# Create singleton instance
token_repository = AsyncTokenRepository()
