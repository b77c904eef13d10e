# app/application/ports/outbound/field_cipher_port.py

from abc import ABC, abstractmethod
from typing import Any, Dict

from app.domain.models.encrypted_value import EncryptedValue


class IFieldCipher(ABC):
    """Encrypts and decrypts single column values."""

    @abstractmethod
    def encrypt_value(self, plaintext: str) -> EncryptedValue:
        pass

    @abstractmethod
    def decrypt(self, envelope) -> str:
        pass

    @abstractmethod
    def is_encrypted(self, value: Any) -> bool:
        pass

    @abstractmethod
    def get_stats(self) -> Dict[str, Any]:
        pass
