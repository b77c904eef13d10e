# app/adapters/outbound/security/auth_user_manager.py

import logging
from datetime import datetime, timedelta
from typing import Optional

import bcrypt
from jose import jwt, JWTError, ExpiredSignatureError
from passlib.context import CryptContext
from starlette.concurrency import run_in_threadpool

from app.adapters.outbound.security.jwt_config import JWTConfig, jwt_config
from app.application.dtos.user_dto import TokenData
from app.domain.exceptions import InvalidTokenException
from app.domain.models.identity_claims import IdentityClaims, TokenClass
from app.domain.services.auth_service import AuthService
from app.shared.utils.datetime_utils import DateTimeUtil

# Configurar logger
logger = logging.getLogger(__name__)


class UserAuthManager:
    """
    Authentication Manager for User operations.

    Responsibilities:
    - Password hashing and verification (bcrypt, off the event loop)
    - Access and refresh token creation and validation, one secret per class
    """

    crypt_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

    # ———— PASSWORD METHODS ————

    @classmethod
    async def hash_password(cls, password: str) -> str:
        """Asynchronously hash a password."""
        return await run_in_threadpool(cls.crypt_context.hash, password)

    @staticmethod
    def hash_password_sync(password: str) -> str:
        """Synchronously hash a password (for ORM hooks)."""
        password_bytes = password.encode("utf-8")
        hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt())
        return hashed.decode("utf-8")

    @classmethod
    async def verify_password(cls, plain_password: str, hashed_password: str) -> bool:
        """Verify a plain password against a hashed password."""
        try:
            return await run_in_threadpool(cls.crypt_context.verify, plain_password, hashed_password)
        except (ValueError, TypeError):
            logger.warning("Stored password hash is not a valid bcrypt hash")
            return False

    @classmethod
    async def dummy_verify(cls) -> None:
        """Spend the same time as a real verification (used when the user does not exist)."""
        await run_in_threadpool(cls.crypt_context.dummy_verify)

    # ———— TOKEN CREATION ————

    @classmethod
    async def create_token(
            cls,
            claims: IdentityClaims,
            token_class: TokenClass,
            expires_delta: Optional[timedelta] = None,
            config: Optional[JWTConfig] = None,
    ) -> str:
        """Sign the claims with the secret of the given token class."""
        config = config or jwt_config
        if expires_delta is None:
            expires_delta = config.get_expiry(token_class)

        payload = AuthService.create_token_payload(claims, expires_delta, token_class)
        token = jwt.encode(payload, config.get_secret_key(token_class), algorithm=config.algorithm)
        logger.debug(f"{token_class.value} token created for user_id={claims.user_id}")
        return token

    @classmethod
    async def create_access_token(cls, claims: IdentityClaims, expires_delta: Optional[timedelta] = None,
                                  config: Optional[JWTConfig] = None) -> str:
        """Create an access token for authentication."""
        return await cls.create_token(claims, TokenClass.ACCESS, expires_delta, config)

    @classmethod
    async def create_refresh_token(cls, claims: IdentityClaims, expires_delta: Optional[timedelta] = None,
                                   config: Optional[JWTConfig] = None) -> str:
        """Create a refresh token."""
        return await cls.create_token(claims, TokenClass.REFRESH, expires_delta, config)

    @classmethod
    async def issue_token_pair(cls, claims: IdentityClaims, config: Optional[JWTConfig] = None) -> TokenData:
        """Mint a fresh access/refresh pair for the same claims. Stateless."""
        config = config or jwt_config
        access_expiry = config.get_expiry(TokenClass.ACCESS)

        access_token = await cls.create_access_token(claims, access_expiry, config)
        refresh_token = await cls.create_refresh_token(claims, config=config)

        return TokenData(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_at=DateTimeUtil.utcnow() + access_expiry,
        )

    # ———— TOKEN VERIFICATION ————

    @classmethod
    async def verify_token(cls, token: str, token_class: TokenClass,
                           config: Optional[JWTConfig] = None) -> IdentityClaims:
        """
        Validate a token against the secret of its expected class.

        Every failure raises the same InvalidTokenException; the cause is only
        logged and kept in ``reason``.
        """
        config = config or jwt_config
        if not token:
            raise InvalidTokenException(reason=InvalidTokenException.MALFORMED)

        try:
            payload = jwt.decode(token, config.get_secret_key(token_class), algorithms=[config.algorithm])
        except ExpiredSignatureError:
            logger.info(f"Expired {token_class.value} token presented")
            raise InvalidTokenException(reason=InvalidTokenException.EXPIRED)
        except JWTError as e:
            logger.warning(f"Invalid {token_class.value} token: {e}")
            raise InvalidTokenException(reason=InvalidTokenException.SIGNATURE)

        if not AuthService.is_token_payload_valid(payload, token_class):
            logger.warning(f"{token_class.value} token with unexpected structure or type: {payload.get('type')}")
            raise InvalidTokenException(reason=InvalidTokenException.WRONG_TYPE)

        try:
            return IdentityClaims.from_payload(payload)
        except ValueError as e:
            logger.warning(f"{token_class.value} token with malformed claims: {e}")
            raise InvalidTokenException(reason=InvalidTokenException.MALFORMED)

    @classmethod
    async def verify_access_token(cls, token: str, config: Optional[JWTConfig] = None) -> IdentityClaims:
        return await cls.verify_token(token, TokenClass.ACCESS, config)

    @classmethod
    async def verify_refresh_token(cls, token: str, config: Optional[JWTConfig] = None) -> IdentityClaims:
        return await cls.verify_token(token, TokenClass.REFRESH, config)

    @staticmethod
    def get_unverified_expiry(token: str) -> Optional[datetime]:
        """
        Read ``exp`` without checking the signature (used to size blacklist entries).

        Returns None when the token cannot be parsed or has no expiry.
        """
        try:
            exp = jwt.get_unverified_claims(token).get("exp")
        except JWTError:
            return None
        if not isinstance(exp, (int, float)):
            return None
        return DateTimeUtil.timestamp_to_datetime(exp)
