# app/adapters/inbound/api/deps.py (async version)

"""
Dependencies for injection into API endpoints.

This module defines functions that provide dependencies via
FastAPI Depends() for authentication, authorization, database access
and the field encryption service.
"""

import logging
from typing import Optional

from fastapi import Depends, Request, Response, Security
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.outbound.persistence.database import get_db
from app.adapters.outbound.security.field_encryption import FieldEncryptionService
from app.adapters.outbound.security.jwt_cookies import jwt_cookie_manager
from app.application.use_cases.auth_use_cases import AsyncAuthService
from app.domain.exceptions import InsufficientPermissionsException
from app.domain.models.identity_claims import IdentityClaims

# Configure logger
logger = logging.getLogger(__name__)

# The Authorization header is read raw: a missing or malformed header must
# reach get_current_claims so it can answer with AUTH_TOKEN_MISSING.
authorization_header = APIKeyHeader(name="Authorization", auto_error=False)

ACCESS_TOKEN_HEADER = "X-Access-Token"


########################################################################
# Database Session Management
########################################################################

# Alias for get_db
get_session = get_db


async def get_auth_service(db: AsyncSession = Depends(get_session)) -> AsyncAuthService:
    return AsyncAuthService(db)


def get_encryption_service(request: Request) -> FieldEncryptionService:
    """The process-wide encryption service built by create_app."""
    return request.app.state.field_encryption


########################################################################
# User Token Authentication
########################################################################


async def get_current_claims(
    request: Request,
    response: Response,
    authorization: Optional[str] = Security(authorization_header),
    auth_service: AsyncAuthService = Depends(get_auth_service),
) -> IdentityClaims:
    """
    Get the identity of the caller from the bearer token.

    When the access token has expired and the refresh cookie is present the
    pair is rotated on the fly: the new access token goes out in the
    ``X-Access-Token`` header and the refresh cookie is replaced.

    Raises:
        MissingTokenException: If no bearer token was sent
        InvalidTokenException: If the token (or the fallback refresh) is invalid
    """
    access_token = jwt_cookie_manager.extract_bearer_token(authorization)
    refresh_token = jwt_cookie_manager.get_token_from_cookie(request)

    claims, rotated = await auth_service.authenticate_access_token(access_token, refresh_token)

    if rotated is not None:
        response.headers[ACCESS_TOKEN_HEADER] = rotated.tokens.access_token
        jwt_cookie_manager.set_refresh_token_cookie(response, rotated.tokens.refresh_token)
        logger.info(f"Transparent token refresh for user_id={claims.user_id}")

    return claims


def require_roles(*roles: str):
    """
    Build a dependency that only lets the given roles through.

    Usage:
        Depends(require_roles("admin", "sysadmin"))
    """
    allowed = {getattr(role, "value", role) for role in roles}

    async def checker(claims: IdentityClaims = Depends(get_current_claims)) -> IdentityClaims:
        if claims.role not in allowed:
            logger.warning(f"user_id={claims.user_id} with role '{claims.role}' denied (requires {sorted(allowed)})")
            raise InsufficientPermissionsException()
        return claims

    return checker
