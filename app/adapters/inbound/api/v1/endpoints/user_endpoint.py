# app/adapters/inbound/api/v1/endpoints/user_endpoint.py (async version)

import logging
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.shared.utils.error_responses import token_errors
from app.application.use_cases.user_use_cases import AsyncUserService
from app.adapters.outbound.security.field_encryption import FieldEncryptionService
from app.adapters.inbound.api.deps import (
    get_session,
    get_current_claims,
    get_encryption_service,
)
from app.application.dtos.user_dto import (
    PhoneUpdate,
    UserProfileOutput,
)
from app.domain.models.identity_claims import IdentityClaims

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/users",
    tags=["Users"],
)


def get_user_service(
        db: AsyncSession = Depends(get_session),
        cipher: FieldEncryptionService = Depends(get_encryption_service),
) -> AsyncUserService:
    return AsyncUserService(db, cipher)


@router.get(
    "/me",
    response_model=UserProfileOutput,
    summary="Get My Data - Logged in user data",
    description="Returns the authenticated user's profile, with encrypted fields decrypted.",
    responses={**token_errors}
)
async def get_my_data(
        claims: IdentityClaims = Depends(get_current_claims),
        service: AsyncUserService = Depends(get_user_service),
):
    return await service.get_profile(claims)


@router.put(
    "/me/phone",
    response_model=UserProfileOutput,
    summary="Update My Phone",
    description="Stores the phone number encrypted at rest.",
    responses={**token_errors}
)
async def update_my_phone(
        data: PhoneUpdate,
        claims: IdentityClaims = Depends(get_current_claims),
        service: AsyncUserService = Depends(get_user_service),
):
    return await service.update_phone(claims, data.phone)
