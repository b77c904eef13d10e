# app/application/use_cases/auth_use_cases.py

"""
Service for user authentication.

This module implements the business logic for authentication operations:
login, refresh rotation, logout (single session and all sessions), password
change and verification of the access token presented on each request.
"""

import logging
import uuid
from dataclasses import dataclass
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.outbound.persistence.repositories import user_repository
from app.adapters.outbound.security.auth_user_manager import UserAuthManager
from app.application.dtos.user_dto import TokenData
from app.application.ports.inbound import IAuthUseCase
from app.application.use_cases.token_blacklist_use_cases import TokenBlacklistService
from app.domain.exceptions import (
    DatabaseOperationException,
    InvalidCredentialsException,
    InvalidTokenException,
    MissingTokenException,
)
from app.domain.models.identity_claims import IdentityClaims
from app.shared.utils.audit_logger import AuditSeverity, log_security_event
from app.shared.utils.messages_utils import get_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthSession:
    """A freshly issued token pair and the claims it carries."""

    tokens: TokenData
    claims: IdentityClaims


class AsyncAuthService(IAuthUseCase):
    """
    Application service for authentication-related operations.

    Responsibilities:
    - Authenticate users and generate JWT tokens
    - Rotate tokens from a refresh token, re-reading the user each time
    - Revoke tokens (logout) and every session of a user (logout-all)
    """

    def __init__(self, db_session: AsyncSession, blacklist: Optional[TokenBlacklistService] = None):
        """Initialize with a database session."""
        self.db = db_session
        self.blacklist = blacklist or TokenBlacklistService(db_session)

    async def login_user(self, username: str, password: str) -> AuthSession:
        """
        Authenticate user and generate access and refresh tokens.

        Raises:
            InvalidCredentialsException: Unknown user, wrong password or inactive
                account, all with the same message.
        """
        user = await user_repository.authenticate(self.db, username, password)

        if not user:
            log_security_event("LOGIN_FAILED", AuditSeverity.MEDIUM)
            raise InvalidCredentialsException(message=get_message("generic_invalid_credentials"))

        claims = user.to_claims(session_id=str(uuid.uuid4()))
        tokens = await UserAuthManager.issue_token_pair(claims)

        logger.info(f"User logged in successfully: user_id={user.id}")
        log_security_event("LOGIN_SUCCESS", AuditSeverity.LOW, {"user_id": user.id, "role": user.role})
        return AuthSession(tokens=tokens, claims=claims)

    async def refresh_token(self, refresh_token: Optional[str]) -> AuthSession:
        """
        Validate a refresh token and issue new access and refresh tokens.

        The user row is read again, so a role change, a deactivation or a
        logout-all takes effect here. The session id is carried over.

        Raises:
            MissingTokenException: If no refresh token was supplied.
            InvalidTokenException: If the refresh token is invalid, revoked or stale,
                or its user no longer exists or is inactive.
        """
        if not refresh_token:
            raise MissingTokenException()

        try:
            claims = await UserAuthManager.verify_refresh_token(refresh_token)

            if await self.blacklist.is_blacklisted(refresh_token):
                raise InvalidTokenException(reason=InvalidTokenException.REVOKED)

            user = await user_repository.get(self.db, id=claims.user_id)
            if not user or not user.is_active:
                raise InvalidTokenException(reason=InvalidTokenException.UNKNOWN_USER)

            if claims.token_version != user.token_version:
                raise InvalidTokenException(reason=InvalidTokenException.STALE_VERSION)

        except InvalidTokenException as e:
            logger.warning(f"Refresh rejected: {e.reason}")
            log_security_event("TOKEN_REFRESH_FAILED", AuditSeverity.MEDIUM, {"reason": e.reason})
            raise

        new_claims = user.to_claims(session_id=claims.session_id or str(uuid.uuid4()))
        tokens = await UserAuthManager.issue_token_pair(new_claims)

        logger.info(f"Token refreshed successfully for user_id={user.id}")
        return AuthSession(tokens=tokens, claims=new_claims)

    async def logout_user(self, access_token: Optional[str], refresh_token: Optional[str]) -> None:
        """
        Revoke the presented tokens. Never fails.

        Only tokens that still verify are recorded: an expired or forged token
        is already unusable and is not worth a row.
        """
        for token, verify in (
                (access_token, UserAuthManager.verify_access_token),
                (refresh_token, UserAuthManager.verify_refresh_token),
        ):
            if not token:
                continue
            try:
                claims = await verify(token)
            except InvalidTokenException:
                continue

            try:
                await self.blacklist.add_to_blacklist(token)
            except DatabaseOperationException as e:
                logger.error(f"Could not blacklist token on logout: {e.original_error}")
                continue

            log_security_event("LOGOUT", AuditSeverity.LOW, {"user_id": claims.user_id})

    async def logout_all(self, claims: IdentityClaims) -> int:
        """
        End every session of the user by bumping its token version.

        Returns:
            The new token version
        """
        user = await user_repository.get(self.db, id=claims.user_id)
        if not user:
            raise InvalidTokenException(reason=InvalidTokenException.UNKNOWN_USER)

        version = await user_repository.bump_token_version(self.db, user)
        log_security_event("LOGOUT_ALL", AuditSeverity.MEDIUM, {"user_id": user.id, "token_version": version})
        return version

    async def change_password(self, claims: IdentityClaims, current_password: str, new_password: str) -> AuthSession:
        """
        Replace the password after checking the current one.

        Other sessions end (token version bump); the calling session gets a new pair.

        Raises:
            InvalidCredentialsException: If the current password does not match.
        """
        user = await user_repository.get(self.db, id=claims.user_id)
        if not user or not user.is_active:
            raise InvalidTokenException(reason=InvalidTokenException.UNKNOWN_USER)

        if not await UserAuthManager.verify_password(current_password, user.password_hash):
            log_security_event("PASSWORD_CHANGE_FAILED", AuditSeverity.MEDIUM, {"user_id": user.id})
            raise InvalidCredentialsException(message=get_message("generic_invalid_credentials"))

        user = await user_repository.update_password(self.db, user, new_password)

        new_claims = user.to_claims(session_id=claims.session_id or str(uuid.uuid4()))
        tokens = await UserAuthManager.issue_token_pair(new_claims)

        log_security_event("PASSWORD_CHANGED", AuditSeverity.MEDIUM, {"user_id": user.id})
        return AuthSession(tokens=tokens, claims=new_claims)

    async def authenticate_access_token(
            self,
            access_token: Optional[str],
            refresh_token: Optional[str] = None,
    ) -> Tuple[IdentityClaims, Optional[AuthSession]]:
        """
        Verify the access token of a request.

        If it failed only because it expired and a refresh token is available,
        the pair is rotated instead and returned alongside the new claims.

        Raises:
            MissingTokenException: If no access token was presented.
            InvalidTokenException: For any other failure, including a failed refresh.
        """
        if not access_token:
            raise MissingTokenException()

        try:
            claims = await UserAuthManager.verify_access_token(access_token)
        except InvalidTokenException as e:
            if e.is_expired and refresh_token:
                logger.info("Access token expired, rotating with refresh token")
                session = await self.refresh_token(refresh_token)
                return session.claims, session
            raise

        if await self.blacklist.is_blacklisted(access_token):
            logger.warning(f"Revoked access token presented for user_id={claims.user_id}")
            raise InvalidTokenException(reason=InvalidTokenException.REVOKED)

        user = await user_repository.get(self.db, id=claims.user_id)
        if not user or not user.is_active:
            raise InvalidTokenException(reason=InvalidTokenException.UNKNOWN_USER)

        if claims.token_version != user.token_version:
            logger.info(f"Stale token version for user_id={user.id}")
            raise InvalidTokenException(reason=InvalidTokenException.STALE_VERSION)

        return claims, None
