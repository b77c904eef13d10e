# app/application/ports/outbound/user_repository_port.py

from abc import abstractmethod
from typing import Any, Optional

from app.application.ports.outbound.generic_repository import IRepository
from app.application.ports.outbound.field_cipher_port import IFieldCipher


class IUserRepository(IRepository[Any]):
    """User repository interface."""

    @abstractmethod
    async def get_by_username(self, db, username: str) -> Optional[Any]:
        pass

    @abstractmethod
    async def authenticate(self, db, username: str, password: str) -> Optional[Any]:
        pass

    @abstractmethod
    async def bump_token_version(self, db, user) -> int:
        pass

    @abstractmethod
    async def update_password(self, db, user, new_password: str):
        pass

    @abstractmethod
    def get_phone(self, user, cipher: IFieldCipher) -> Optional[str]:
        pass

    @abstractmethod
    async def set_phone(self, db, user, phone: Optional[str], cipher: IFieldCipher):
        pass
