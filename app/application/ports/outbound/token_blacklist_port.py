# app/application/ports/outbound/token_blacklist_port.py

from abc import ABC, abstractmethod
from datetime import datetime


class ITokenBlacklistRepository(ABC):
    """Storage of revoked token fingerprints."""

    @abstractmethod
    async def add_to_blacklist(self, db, token_hash: str, expires_at: datetime) -> None:
        pass

    @abstractmethod
    async def is_blacklisted(self, db, token_hash: str) -> bool:
        pass

    @abstractmethod
    async def cleanup_expired(self, db) -> int:
        pass

    @abstractmethod
    async def initialize_table(self, engine) -> None:
        pass
