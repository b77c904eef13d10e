# app/adapters/inbound/api/v1/endpoints/encryption_endpoint.py

import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from app.adapters.inbound.api.deps import get_encryption_service, require_roles
from app.adapters.outbound.security.field_encryption import FieldEncryptionService
from app.application.dtos.encryption_dto import (
    EncryptionStatus,
    EncryptionTestRequest,
    EncryptionTestResult,
)
from app.application.use_cases.encryption_use_cases import EncryptionAdminService
from app.domain.models.identity_claims import IdentityClaims, UserRole
from app.shared.utils.error_responses import permission_errors

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/encryption",
    tags=["Encryption"],
)

require_admin = require_roles(UserRole.ADMIN, UserRole.SYSADMIN)


def get_encryption_admin_service(
        cipher: FieldEncryptionService = Depends(get_encryption_service),
) -> EncryptionAdminService:
    return EncryptionAdminService(cipher)


@router.get(
    "/status",
    response_model=EncryptionStatus,
    summary="Encryption status",
    description="Algorithm, key size, key source and usage counters. Admins only.",
    responses={**permission_errors}
)
async def get_encryption_status(
        _: IdentityClaims = Depends(require_admin),
        service: EncryptionAdminService = Depends(get_encryption_admin_service),
):
    return service.get_status()


@router.post(
    "/test",
    response_model=EncryptionTestResult,
    summary="Encryption self-test",
    description="Round-trips a sample value through encrypt/decrypt. The ciphertext is never returned.",
    responses={**permission_errors}
)
async def test_encryption(
        data: Optional[EncryptionTestRequest] = Body(None),
        claims: IdentityClaims = Depends(require_admin),
        service: EncryptionAdminService = Depends(get_encryption_admin_service),
):
    return service.run_self_test(claims, data.sample if data else None)
