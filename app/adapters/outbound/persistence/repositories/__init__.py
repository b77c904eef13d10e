# app/adapters/outbound/persistence/repositories/__init__.py

from app.adapters.outbound.persistence.repositories.user_repository import user_repository, AsyncUserCRUD
from app.adapters.outbound.persistence.repositories.token_repository import token_repository, AsyncTokenRepository

__all__ = [
    "user_repository",
    "AsyncUserCRUD",
    "token_repository",
    "AsyncTokenRepository",
]
