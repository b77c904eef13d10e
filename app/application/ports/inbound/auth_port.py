# app/application/ports/inbound/auth_port.py

from abc import ABC, abstractmethod
from typing import Optional

from app.application.dtos.user_dto import TokenData
from app.domain.models.identity_claims import IdentityClaims


class IAuthUseCase(ABC):
    """Interface for authentication use cases."""

    @abstractmethod
    async def login_user(self, username: str, password: str):
        pass

    @abstractmethod
    async def refresh_token(self, refresh_token: str):
        pass

    @abstractmethod
    async def logout_user(self, access_token: Optional[str], refresh_token: Optional[str]) -> None:
        pass

    @abstractmethod
    async def logout_all(self, claims: IdentityClaims) -> int:
        pass

    @abstractmethod
    async def change_password(self, claims: IdentityClaims, current_password: str, new_password: str) -> TokenData:
        pass
