# app/test/unit/test_auth_user_manager.py

# pytest app/test/unit/test_auth_user_manager.py -v

"""
Emissão e verificação de tokens: um segredo por classe de token.
"""

from datetime import timedelta

import pytest
from jose import jwt

from app.adapters.outbound.security.auth_user_manager import UserAuthManager
from app.adapters.outbound.security.jwt_config import JWTConfig, jwt_config
from app.domain.exceptions import InvalidTokenException
from app.domain.models.identity_claims import IdentityClaims, TokenClass
from app.domain.services.auth_service import AuthService
from app.shared.utils.datetime_utils import DateTimeUtil


@pytest.fixture
def claims() -> IdentityClaims:
    return IdentityClaims(
        user_id=42,
        username="instructor.ana",
        role="instructor",
        organization_id=7,
        organization_name="Red Cross Unit 7",
        session_id="session-abc",
        token_version=3,
    )


@pytest.mark.asyncio
async def test_access_token_round_trip(claims):
    token = await UserAuthManager.create_access_token(claims)

    decoded = await UserAuthManager.verify_access_token(token)

    assert decoded == claims


@pytest.mark.asyncio
async def test_refresh_token_round_trip(claims):
    token = await UserAuthManager.create_refresh_token(claims)

    decoded = await UserAuthManager.verify_refresh_token(token)

    assert decoded == claims


@pytest.mark.asyncio
async def test_token_classes_are_not_interchangeable(claims):
    access = await UserAuthManager.create_access_token(claims)
    refresh = await UserAuthManager.create_refresh_token(claims)

    with pytest.raises(InvalidTokenException) as exc_access:
        await UserAuthManager.verify_refresh_token(access)
    with pytest.raises(InvalidTokenException) as exc_refresh:
        await UserAuthManager.verify_access_token(refresh)

    assert exc_access.value.reason == InvalidTokenException.SIGNATURE
    assert exc_refresh.value.reason == InvalidTokenException.SIGNATURE


@pytest.mark.asyncio
async def test_type_claim_is_checked_even_with_the_right_secret(claims):
    payload = AuthService.create_token_payload(claims, timedelta(minutes=5), TokenClass.REFRESH)
    token = jwt.encode(payload, jwt_config.get_secret_key(TokenClass.ACCESS), algorithm=jwt_config.algorithm)

    with pytest.raises(InvalidTokenException) as exc:
        await UserAuthManager.verify_access_token(token)

    assert exc.value.reason == InvalidTokenException.WRONG_TYPE


@pytest.mark.asyncio
async def test_expired_token_reason(claims):
    token = await UserAuthManager.create_access_token(claims, expires_delta=timedelta(seconds=-1))

    with pytest.raises(InvalidTokenException) as exc:
        await UserAuthManager.verify_access_token(token)

    assert exc.value.is_expired
    # O motivo não vaza para a resposta
    assert exc.value.message == "Invalid token."


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["", "abc", "a.b.c"])
async def test_garbage_tokens_are_invalid(token):
    with pytest.raises(InvalidTokenException):
        await UserAuthManager.verify_access_token(token)


@pytest.mark.asyncio
async def test_missing_required_claim_is_rejected(claims):
    payload = AuthService.create_token_payload(claims, timedelta(minutes=5), TokenClass.ACCESS)
    del payload["role"]
    token = jwt.encode(payload, jwt_config.get_secret_key(TokenClass.ACCESS), algorithm=jwt_config.algorithm)

    with pytest.raises(InvalidTokenException):
        await UserAuthManager.verify_access_token(token)


@pytest.mark.asyncio
async def test_issue_token_pair_lifetimes(claims):
    before = DateTimeUtil.utcnow()
    tokens = await UserAuthManager.issue_token_pair(claims)

    access_exp = jwt.get_unverified_claims(tokens.access_token)["exp"]
    refresh_exp = jwt.get_unverified_claims(tokens.refresh_token)["exp"]
    now_ts = DateTimeUtil.datetime_to_timestamp(before)

    assert abs(access_exp - now_ts - 15 * 60) <= 2
    assert abs(refresh_exp - now_ts - 7 * 24 * 3600) <= 2
    assert abs((tokens.expires_at - before).total_seconds() - 15 * 60) <= 2


@pytest.mark.asyncio
async def test_two_tokens_for_same_claims_differ(claims):
    first = await UserAuthManager.create_access_token(claims)
    second = await UserAuthManager.create_access_token(claims)

    assert first != second


@pytest.mark.asyncio
async def test_custom_config_secrets_are_used(claims):
    config = JWTConfig(access_secret="other-access", refresh_secret="other-refresh")
    token = await UserAuthManager.create_access_token(claims, config=config)

    assert await UserAuthManager.verify_access_token(token, config=config) == claims
    with pytest.raises(InvalidTokenException):
        await UserAuthManager.verify_access_token(token)


def test_config_rejects_identical_secrets():
    with pytest.raises(ValueError):
        JWTConfig(access_secret="same", refresh_secret="same")


def test_get_unverified_expiry(claims):
    assert UserAuthManager.get_unverified_expiry("not-a-token") is None


@pytest.mark.asyncio
async def test_get_unverified_expiry_reads_exp(claims):
    token = await UserAuthManager.create_access_token(claims, expires_delta=timedelta(minutes=10))

    expiry = UserAuthManager.get_unverified_expiry(token)

    assert expiry is not None
    assert abs((expiry - DateTimeUtil.utcnow()).total_seconds() - 600) <= 2


@pytest.mark.asyncio
async def test_password_hash_and_verify():
    hashed = await UserAuthManager.hash_password("Secret123!")

    assert hashed != "Secret123!"
    assert await UserAuthManager.verify_password("Secret123!", hashed)
    assert not await UserAuthManager.verify_password("secret123!", hashed)


@pytest.mark.asyncio
async def test_verify_password_with_invalid_hash_returns_false():
    assert not await UserAuthManager.verify_password("Secret123!", "not-a-bcrypt-hash")


def test_hash_token_is_sha256_hex():
    digest = AuthService.hash_token("some.jwt.value")

    assert len(digest) == 64
    assert digest == AuthService.hash_token("some.jwt.value")
    assert digest != AuthService.hash_token("some.jwt.valuE")
