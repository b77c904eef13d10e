# app/test/integration/test_token_blacklist.py

# Para Rodar o Script:
# pytest app/test/integration/test_token_blacklist.py -v

"""
Blacklist de tokens contra um banco real (SQLite): idempotência, expurgo,
inicialização e política de falha.
"""

import asyncio
from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, inspect, select
from sqlalchemy.ext.asyncio import create_async_engine

from app.adapters.outbound.persistence.models import TokenBlacklist
from app.adapters.outbound.persistence.repositories import token_repository
from app.adapters.outbound.security.auth_user_manager import UserAuthManager
from app.application.use_cases import token_blacklist_use_cases
from app.application.use_cases.token_blacklist_use_cases import (
    TokenBlacklistService,
    blacklist_cleanup_loop,
    initialize_blacklist,
)
from app.domain.exceptions import DatabaseOperationException
from app.domain.models.identity_claims import IdentityClaims
from app.domain.services.auth_service import AuthService
from app.shared.utils.datetime_utils import DateTimeUtil


async def _count(db_session) -> int:
    return (await db_session.execute(select(func.count()).select_from(TokenBlacklist))).scalar_one()


async def _make_token(minutes: int = 15) -> str:
    claims = IdentityClaims(user_id=1, username="someone", role="student")
    return await UserAuthManager.create_access_token(claims, expires_delta=timedelta(minutes=minutes))


@pytest.mark.asyncio
async def test_add_and_check(db_session):
    service = TokenBlacklistService(db_session)
    token = await _make_token()

    assert not await service.is_blacklisted(token)
    await service.add_to_blacklist(token)
    assert await service.is_blacklisted(token)


@pytest.mark.asyncio
async def test_only_the_hash_is_stored(db_session):
    service = TokenBlacklistService(db_session)
    token = await _make_token()

    await service.add_to_blacklist(token)

    stored = (await db_session.execute(select(TokenBlacklist.token_hash))).scalars().all()
    assert stored == [AuthService.hash_token(token)]
    assert token not in stored


@pytest.mark.asyncio
async def test_add_is_idempotent(db_session):
    service = TokenBlacklistService(db_session)
    token = await _make_token()

    await service.add_to_blacklist(token)
    await service.add_to_blacklist(token)
    await service.add_to_blacklist(token)

    assert await _count(db_session) == 1


@pytest.mark.asyncio
async def test_concurrent_adds_of_same_token(session_factory):
    token = await _make_token()

    async def revoke():
        async with session_factory() as session:
            await TokenBlacklistService(session).add_to_blacklist(token)

    await asyncio.gather(*(revoke() for _ in range(5)))

    async with session_factory() as session:
        assert await _count(session) == 1


@pytest.mark.asyncio
async def test_expiry_is_read_from_token(db_session):
    service = TokenBlacklistService(db_session)
    token = await _make_token(minutes=30)

    await service.add_to_blacklist(token)

    expires_at = (await db_session.execute(select(TokenBlacklist.expires_at))).scalar_one()
    expected = DateTimeUtil.for_storage(DateTimeUtil.utcnow() + timedelta(minutes=30))
    assert abs((expires_at - expected).total_seconds()) < 5


@pytest.mark.asyncio
async def test_unparseable_token_gets_refresh_lifetime(db_session):
    service = TokenBlacklistService(db_session)

    await service.add_to_blacklist("not-a-jwt")

    expires_at = (await db_session.execute(select(TokenBlacklist.expires_at))).scalar_one()
    expected = DateTimeUtil.for_storage(DateTimeUtil.utcnow() + timedelta(days=7))
    assert abs((expires_at - expected).total_seconds()) < 5


@pytest.mark.asyncio
async def test_cleanup_removes_only_expired(db_session):
    now = DateTimeUtil.utcnow()
    await token_repository.add_to_blacklist(db_session, "a" * 64, now - timedelta(hours=1))
    await token_repository.add_to_blacklist(db_session, "b" * 64, now - timedelta(seconds=1))
    await token_repository.add_to_blacklist(db_session, "c" * 64, now + timedelta(hours=1))

    removed = await TokenBlacklistService(db_session).cleanup_expired_tokens()

    assert removed == 2
    assert await token_repository.is_blacklisted(db_session, "c" * 64)
    assert not await token_repository.is_blacklisted(db_session, "a" * 64)


@pytest.mark.asyncio
async def test_cleanup_with_nothing_to_remove(db_session):
    assert await TokenBlacklistService(db_session).cleanup_expired_tokens() == 0


@pytest.mark.asyncio
async def test_initialize_table_is_idempotent(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'init.db'}")
    try:
        await token_repository.initialize_table(engine)
        await token_repository.initialize_table(engine)

        async with engine.connect() as conn:
            tables, indexes = await conn.run_sync(
                lambda sync_conn: (
                    inspect(sync_conn).get_table_names(),
                    {ix["name"] for ix in inspect(sync_conn).get_indexes("token_blacklist")},
                )
            )
    finally:
        await engine.dispose()

    assert "token_blacklist" in tables
    assert {"idx_token_blacklist_hash", "idx_token_blacklist_expires"} <= indexes


@pytest.mark.asyncio
async def test_initialize_blacklist_sweeps_expired_rows(db_engine, session_factory):
    async with session_factory() as session:
        await token_repository.add_to_blacklist(session, "d" * 64, DateTimeUtil.utcnow() - timedelta(minutes=1))

    await initialize_blacklist(db_engine, session_factory)

    async with session_factory() as session:
        assert await _count(session) == 0


@pytest.mark.asyncio
async def test_initialize_blacklist_never_raises(session_factory):
    repository = AsyncMock()
    repository.initialize_table.side_effect = RuntimeError("database down")

    await initialize_blacklist(object(), session_factory, repository)

    repository.cleanup_expired.assert_not_called()


# ─────────────────────────────────────────────────────────────
# Política de falha


@pytest.mark.asyncio
async def test_fail_open_on_storage_error():
    repository = AsyncMock()
    repository.is_blacklisted.side_effect = DatabaseOperationException(original_error=RuntimeError("boom"))

    service = TokenBlacklistService(AsyncMock(), repository=repository, fail_open=True)

    assert await service.is_blacklisted("any-token") is False


@pytest.mark.asyncio
async def test_fail_closed_on_storage_error():
    repository = AsyncMock()
    repository.is_blacklisted.side_effect = DatabaseOperationException(original_error=RuntimeError("boom"))

    service = TokenBlacklistService(AsyncMock(), repository=repository, fail_open=False)

    assert await service.is_blacklisted("any-token") is True


@pytest.mark.asyncio
async def test_fail_policy_defaults_to_settings(monkeypatch):
    monkeypatch.setattr(token_blacklist_use_cases.settings, "BLACKLIST_FAIL_OPEN", False)

    assert TokenBlacklistService(AsyncMock()).fail_open is False


@pytest.mark.asyncio
async def test_cleanup_error_is_not_fatal():
    repository = AsyncMock()
    repository.cleanup_expired.side_effect = DatabaseOperationException(original_error=RuntimeError("boom"))

    removed = await TokenBlacklistService(AsyncMock(), repository=repository).cleanup_expired_tokens()

    assert removed == 0


@pytest.mark.asyncio
async def test_add_propagates_storage_error():
    repository = AsyncMock()
    repository.add_to_blacklist.side_effect = DatabaseOperationException(original_error=RuntimeError("boom"))

    with pytest.raises(DatabaseOperationException):
        await TokenBlacklistService(AsyncMock(), repository=repository).add_to_blacklist("token")


@pytest.mark.asyncio
async def test_cleanup_loop_runs_each_interval(monkeypatch, session_factory):
    sleeps = []

    async def fake_sleep(seconds):
        sleeps.append(seconds)
        if len(sleeps) > 2:
            raise asyncio.CancelledError()

    monkeypatch.setattr(token_blacklist_use_cases, "asyncio", SimpleNamespace(sleep=fake_sleep))
    repository = AsyncMock()
    repository.cleanup_expired.side_effect = [3, DatabaseOperationException(original_error=RuntimeError("boom"))]

    with pytest.raises(asyncio.CancelledError):
        await blacklist_cleanup_loop(session_factory, 5, repository)

    assert sleeps == [300, 300, 300]
    assert repository.cleanup_expired.await_count == 2
