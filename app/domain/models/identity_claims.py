# app/domain/models/identity_claims.py

"""
Identity claims embedded in every access and refresh token.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, Dict, Optional


class UserRole(str, Enum):
    """Roles known to the training platform."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ORGANIZATION = "organization"
    ACCOUNTANT = "accountant"
    ADMIN = "admin"
    SYSADMIN = "sysadmin"
    HR = "hr"
    VENDOR = "vendor"

    @classmethod
    def values(cls) -> set:
        return {role.value for role in cls}


class TokenClass(str, Enum):
    """Token classes; each one is signed with its own secret."""

    ACCESS = "access"
    REFRESH = "refresh"


@dataclass(frozen=True)
class IdentityClaims:
    """
    Who the bearer is, as of the moment the token was signed.

    Frozen: a role change produces a new token, never a mutated one.
    """

    user_id: int
    username: str
    role: str
    organization_id: Optional[int] = None
    organization_name: Optional[str] = None
    session_id: Optional[str] = None
    token_version: int = 0

    def to_payload(self) -> Dict[str, Any]:
        """Claims as they are written into the JWT body (``sub`` is the string id)."""
        payload = asdict(self)
        payload["sub"] = str(self.user_id)
        return payload

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "IdentityClaims":
        """
        Rebuild claims from a decoded JWT body.

        Raises:
            ValueError: If a required claim is missing or has the wrong type
        """
        try:
            user_id = int(payload.get("user_id", payload["sub"]))
            username = payload["username"]
            role = payload["role"]
        except (KeyError, TypeError, ValueError) as e:
            raise ValueError(f"Incomplete identity claims: {e}") from e

        if not isinstance(username, str) or not isinstance(role, str):
            raise ValueError("Identity claims 'username' and 'role' must be strings")

        organization_id = payload.get("organization_id")
        return cls(
            user_id=user_id,
            username=username,
            role=role,
            organization_id=int(organization_id) if organization_id is not None else None,
            organization_name=payload.get("organization_name"),
            session_id=payload.get("session_id"),
            token_version=int(payload.get("token_version") or 0),
        )
