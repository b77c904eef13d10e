# app/application/use_cases/user_use_cases.py (async version)

"""
Service for the authenticated user's own profile.

The phone number is stored encrypted; it is decrypted here for the response
and encrypted here before it is written, never cached in clear text.
"""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from app.adapters.outbound.persistence.models import User
from app.adapters.outbound.persistence.repositories import user_repository
from app.application.dtos.user_dto import UserProfileOutput
from app.application.ports.outbound import IFieldCipher
from app.domain.exceptions import ResourceNotFoundException
from app.domain.models.identity_claims import IdentityClaims
from app.shared.utils.datetime_utils import DateTimeUtil

logger = logging.getLogger(__name__)


class AsyncUserService:
    """Service layer (async) for the current **User**."""

    def __init__(self, db_session: AsyncSession, cipher: IFieldCipher):
        self.db: AsyncSession = db_session
        self.cipher = cipher

    async def _get_user(self, user_id: int) -> User:
        user = await user_repository.get(self.db, id=user_id)
        if not user:
            logger.warning("User not found: %s", user_id)
            raise ResourceNotFoundException(message="User not found", resource_id=user_id)
        return user

    def _to_profile(self, user: User) -> UserProfileOutput:
        return UserProfileOutput(
            id=user.id,
            username=user.username,
            role=user.role,
            organization_id=user.organization_id,
            organization_name=user.organization_name,
            email=user.email,
            phone=user_repository.get_phone(user, self.cipher),
            is_active=user.is_active,
            created_at=DateTimeUtil.from_storage(user.created_at),
        )

    async def get_profile(self, claims: IdentityClaims) -> UserProfileOutput:
        user = await self._get_user(claims.user_id)
        return self._to_profile(user)

    async def update_phone(self, claims: IdentityClaims, phone: str) -> UserProfileOutput:
        user = await self._get_user(claims.user_id)
        user = await user_repository.set_phone(self.db, user, phone, self.cipher)
        logger.info("Phone updated for user_id=%s", user.id)
        return self._to_profile(user)
