# app/application/ports/outbound/__init__.py

from .generic_repository import IRepository
from .field_cipher_port import IFieldCipher
from .user_repository_port import IUserRepository
from .token_blacklist_port import ITokenBlacklistRepository

__all__ = [
    "IRepository",
    "IFieldCipher",
    "IUserRepository",
    "ITokenBlacklistRepository",
]
