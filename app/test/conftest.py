# app/test/conftest.py

import os
from http.cookiejar import CookieJar, DefaultCookiePolicy

# Configuração de teste antes de qualquer import da aplicação
os.environ["ENVIRONMENT"] = "testing"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_ACCESS_SECRET"] = "test-access-secret-0f3c9a"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret-7b21de"
os.environ["DB_ENCRYPTION_KEY"] = "0123456789abcdef" * 4
os.environ["BLACKLIST_FAIL_OPEN"] = "true"
os.environ["BLACKLIST_CLEANUP_INTERVAL_MINUTES"] = "0"

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from app.adapters.outbound.persistence.database import get_db
from app.adapters.outbound.persistence.models import Base, Organization
from app.adapters.outbound.persistence.repositories import user_repository
from app.domain.models.identity_claims import UserRole
from app.main import app
from app.test.helpers import ADMIN_PASSWORD, API, STUDENT_PASSWORD, read_refresh_cookie


@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """Banco SQLite isolado por teste, com o schema completo."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(session_factory):
    """Cliente HTTP contra a aplicação, com get_db apontando para o banco do teste."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    # Nenhum cookie é guardado entre requisições: o refresh token vai sempre explícito
    no_cookies = CookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
            transport=ASGITransport(app=app),
            base_url="http://testserver",
            cookies=no_cookies,
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def organization(db_session):
    org = Organization(name="Lifesaver Training Center")
    db_session.add(org)
    await db_session.commit()
    await db_session.refresh(org)
    return org


@pytest_asyncio.fixture
async def student_user(db_session, organization):
    return await user_repository.create_with_password(
        db_session,
        username="student.one",
        password=STUDENT_PASSWORD,
        role=UserRole.STUDENT.value,
        organization_id=organization.id,
        email="student.one@example.com",
    )


@pytest_asyncio.fixture
async def admin_user(db_session):
    return await user_repository.create_with_password(
        db_session,
        username="admin.one",
        password=ADMIN_PASSWORD,
        role=UserRole.ADMIN.value,
    )


@pytest.fixture
def login(async_client):
    """
    Faz login pela API e devolve (access_token, refresh_token, body).
    """

    async def _login(username: str, password: str):
        response = await async_client.post(f"{API}/auth/login", json={"username": username, "password": password})
        assert response.status_code == 200, f"Erro ao fazer login: {response.text}"
        body = response.json()
        return body["accessToken"], read_refresh_cookie(response), body

    return _login
