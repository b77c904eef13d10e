# app/test/use_cases/test_user_use_cases.py

# pytest app/test/use_cases/test_user_use_cases.py

import pytest

from app.adapters.outbound.persistence.repositories import user_repository
from app.adapters.outbound.security.field_encryption import FieldEncryptionService, derive_key
from app.application.use_cases.encryption_use_cases import EncryptionAdminService
from app.application.use_cases.user_use_cases import AsyncUserService
from app.domain.exceptions import DecryptionException, ResourceNotFoundException
from app.domain.models.identity_claims import IdentityClaims


@pytest.fixture
def cipher() -> FieldEncryptionService:
    return FieldEncryptionService(*derive_key("unit-test-passphrase"))


@pytest.mark.asyncio
async def test_get_profile(db_session, student_user, cipher):
    service = AsyncUserService(db_session, cipher)

    profile = await service.get_profile(student_user.to_claims())

    assert profile.id == student_user.id
    assert profile.organization_name == "Lifesaver Training Center"
    assert profile.phone is None
    assert profile.created_at.tzinfo is not None


@pytest.mark.asyncio
async def test_update_phone_round_trip(db_session, student_user, cipher):
    service = AsyncUserService(db_session, cipher)

    profile = await service.update_phone(student_user.to_claims(), "+44 20 7946 0958")

    assert profile.phone == "+44 20 7946 0958"
    assert student_user.phone != "+44 20 7946 0958"
    assert cipher.is_encrypted(student_user.phone)
    assert user_repository.get_phone(student_user, cipher) == "+44 20 7946 0958"


@pytest.mark.asyncio
async def test_phone_written_with_other_key_fails_closed(db_session, student_user, cipher):
    await AsyncUserService(db_session, cipher).update_phone(student_user.to_claims(), "+44 20 7946 0958")

    other = FieldEncryptionService(*derive_key("another-passphrase"))
    with pytest.raises(DecryptionException):
        await AsyncUserService(db_session, other).get_profile(student_user.to_claims())


@pytest.mark.asyncio
async def test_profile_of_missing_user(db_session, cipher):
    claims = IdentityClaims(user_id=999, username="ghost", role="student")

    with pytest.raises(ResourceNotFoundException):
        await AsyncUserService(db_session, cipher).get_profile(claims)


@pytest.mark.asyncio
async def test_bump_token_version(db_session, student_user):
    assert student_user.token_version == 0

    assert await user_repository.bump_token_version(db_session, student_user) == 1
    assert await user_repository.bump_token_version(db_session, student_user) == 2


@pytest.mark.asyncio
async def test_update_password_bumps_version(db_session, student_user):
    user = await user_repository.update_password(db_session, student_user, "BrandNewPass456!")

    assert user.token_version == 1
    assert await user_repository.authenticate(db_session, "student.one", "BrandNewPass456!") is not None


def test_encryption_status_flags_fallback_key():
    fallback = EncryptionAdminService(FieldEncryptionService(*derive_key(None)))
    configured = EncryptionAdminService(FieldEncryptionService(*derive_key("0f" * 32)))

    assert fallback.get_status().secure is False
    assert configured.get_status().secure is True
    assert configured.get_status().key_source == "hex"


def test_encryption_self_test(cipher):
    claims = IdentityClaims(user_id=1, username="admin", role="admin")

    result = EncryptionAdminService(cipher).run_self_test(claims, "hello")

    assert result.success is True
    assert result.envelope_parts == 3
    assert result.round_trip_matches is True
