# app/application/use_cases/token_blacklist_use_cases.py

"""
Token blacklist service.

Revoked tokens are remembered by fingerprint until they would have expired
anyway. The check on every request follows ``BLACKLIST_FAIL_OPEN``: when the
store cannot be queried, fail-open lets the token through (availability),
fail-closed treats it as revoked (strictness).
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.configuration.config import settings
from app.adapters.outbound.persistence.repositories import token_repository
from app.adapters.outbound.security.auth_user_manager import UserAuthManager
from app.application.ports.outbound import ITokenBlacklistRepository
from app.domain.exceptions import DatabaseOperationException
from app.domain.services.auth_service import AuthService
from app.shared.utils.audit_logger import AuditSeverity, log_security_event
from app.shared.utils.datetime_utils import DateTimeUtil

logger = logging.getLogger(__name__)


class TokenBlacklistService:
    """
    Application service around the blacklist repository.

    Responsibilities:
    - Fingerprint and store revoked tokens (idempotent)
    - Answer "is this token revoked?" with the configured failure policy
    - Purge entries past their expiry
    """

    def __init__(
            self,
            db_session: AsyncSession,
            repository: ITokenBlacklistRepository = token_repository,
            fail_open: Optional[bool] = None,
    ):
        self.db = db_session
        self.repository = repository
        self.fail_open = settings.BLACKLIST_FAIL_OPEN if fail_open is None else fail_open

    hash_token = staticmethod(AuthService.hash_token)

    async def add_to_blacklist(self, token: str, expires_at: Optional[datetime] = None) -> None:
        """
        Revoke a token until ``expires_at``.

        When no expiry is given it is read from the token itself; a token
        without a readable expiry is kept for the refresh-token lifetime.
        """
        if expires_at is None:
            expires_at = UserAuthManager.get_unverified_expiry(token)
        if expires_at is None:
            expires_at = DateTimeUtil.utcnow() + settings.refresh_token_lifetime

        await self.repository.add_to_blacklist(self.db, self.hash_token(token), expires_at)
        log_security_event("TOKEN_REVOKED", AuditSeverity.LOW, {"expires_at": expires_at.isoformat()})

    async def is_blacklisted(self, token: str) -> bool:
        try:
            return await self.repository.is_blacklisted(self.db, self.hash_token(token))
        except DatabaseOperationException as e:
            if self.fail_open:
                logger.error(f"Blacklist check failed, treating token as not revoked: {e.original_error}")
                log_security_event("BLACKLIST_CHECK_FAILED", AuditSeverity.MEDIUM, {"policy": "fail-open"})
                return False
            logger.error(f"Blacklist check failed, treating token as revoked: {e.original_error}")
            log_security_event("BLACKLIST_CHECK_FAILED", AuditSeverity.MEDIUM, {"policy": "fail-closed"})
            return True

    async def cleanup_expired_tokens(self) -> int:
        """Delete expired entries. Storage failures are logged and reported as 0 removed."""
        try:
            removed = await self.repository.cleanup_expired(self.db)
        except DatabaseOperationException as e:
            logger.warning(f"Token blacklist cleanup failed: {e.original_error}")
            return 0

        if removed:
            logger.info(f"Cleaned up {removed} expired token blacklist entries")
        return removed


async def initialize_blacklist(engine, session_factory, repository: ITokenBlacklistRepository = token_repository) -> None:
    """Startup step: create the table/indexes if needed, then sweep expired rows."""
    try:
        await repository.initialize_table(engine)
    except Exception:
        logger.exception("Token blacklist initialization failed")
        return

    async with session_factory() as db:
        await TokenBlacklistService(db, repository).cleanup_expired_tokens()


async def blacklist_cleanup_loop(session_factory, interval_minutes: int,
                                 repository: ITokenBlacklistRepository = token_repository) -> None:
    """Periodically remove expired entries from the token blacklist."""
    while True:
        await asyncio.sleep(interval_minutes * 60)
        try:
            async with session_factory() as db:
                await TokenBlacklistService(db, repository).cleanup_expired_tokens()
        except Exception:
            logger.exception("Error cleaning up token blacklist")
