# app/domain/services/auth_service.py

from datetime import timedelta
from typing import Any, Dict
import hashlib
import uuid

from app.domain.models.identity_claims import IdentityClaims, TokenClass
from app.shared.utils.datetime_utils import DateTimeUtil


class AuthService:
    """
    Domain service for authentication-related business logic.
    """

    REQUIRED_CLAIMS = ("sub", "exp", "iat", "type", "jti", "username", "role")

    @staticmethod
    def create_token_payload(
            claims: IdentityClaims,
            expires_delta: timedelta,
            token_class: TokenClass,
    ) -> Dict[str, Any]:
        """
        Create a token payload with standard claims.

        Args:
            claims: Identity of the bearer
            expires_delta: Token lifetime
            token_class: access or refresh

        Returns:
            Dict with all token claims
        """
        now = DateTimeUtil.utcnow()

        payload = claims.to_payload()
        payload.update({
            "iat": DateTimeUtil.datetime_to_timestamp(now),
            "exp": DateTimeUtil.datetime_to_timestamp(now + expires_delta),
            "type": token_class.value,
            # unique per token, so two tokens minted in the same second never collide
            "jti": str(uuid.uuid4()),
        })
        return payload

    @classmethod
    def is_token_payload_valid(cls, token_payload: Dict[str, Any], expected_class: TokenClass) -> bool:
        """
        Validate a decoded token's structure and class.

        Signature and expiry are checked by the JWT library before this runs.
        """
        if not all(k in token_payload for k in cls.REQUIRED_CLAIMS):
            return False

        return token_payload.get("type") == expected_class.value

    @staticmethod
    def hash_token(token: str) -> str:
        """One-way, fixed-length fingerprint of a raw token (SHA-256 hex)."""
        return hashlib.sha256(token.encode("utf-8")).hexdigest()
