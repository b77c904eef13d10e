# app/adapters/outbound/security/field_encryption.py

"""
Field-level encryption for sensitive column values.

Values are encrypted with AES-256-GCM under a process-wide key and stored as
a single string envelope ``iv:tag:ciphertext`` (each part hex encoded). A new
random IV is drawn for every call, and decryption refuses to return anything
unless the authentication tag verifies.

The service is built once at startup (``FieldEncryptionService.from_settings``)
and handed to the code that reads or writes encrypted columns.
"""

import logging
import re
import secrets
from typing import Any, Dict, Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from app.application.ports.outbound.field_cipher_port import IFieldCipher
from app.domain.exceptions import DecryptionException, EncryptionException
from app.domain.models.encrypted_value import ENVELOPE_SEPARATOR, EncryptedValue
from app.shared.utils.audit_logger import AuditSeverity, log_security_event

logger = logging.getLogger(__name__)

ALGORITHM = "aes-256-gcm"
KEY_LENGTH = 32  # 256 bits
IV_LENGTH = 12  # 96 bits, the GCM standard nonce size
# Envelopes written by the previous backend carry a 16-byte IV; both decrypt
ACCEPTED_IV_LENGTHS = (IV_LENGTH, 16)
TAG_LENGTH = 16  # 128 bits

# Binds envelopes to this use so they cannot be replayed into another AES-GCM consumer
ASSOCIATED_DATA = b"database-encryption"

PASSPHRASE_SALT = b"db-encryption-salt"
FALLBACK_PASSPHRASE = b"default-key-not-secure"
FALLBACK_SALT = b"salt"

KEY_SOURCE_HEX = "hex"
KEY_SOURCE_PASSPHRASE = "passphrase"
KEY_SOURCE_FALLBACK = "insecure-fallback"

_HEX_KEY_PATTERN = re.compile(r"^[0-9a-fA-F]{%d}$" % (KEY_LENGTH * 2))
_ENVELOPE_PATTERN = re.compile(
    r"^(?:%s):[0-9a-f]{%d}:[0-9a-f]*$" % (
        "|".join("[0-9a-f]{%d}" % (n * 2) for n in ACCEPTED_IV_LENGTHS), TAG_LENGTH * 2
    )
)


def _scrypt(passphrase: bytes, salt: bytes) -> bytes:
    # N=2**14, r=8, p=1
    return Scrypt(salt=salt, length=KEY_LENGTH, n=2 ** 14, r=8, p=1).derive(passphrase)


def derive_key(secret: Optional[str]) -> tuple:
    """
    Turn the configured secret into a 32-byte key.

    Returns:
        (key, key_source) where key_source is ``hex``, ``passphrase`` or ``insecure-fallback``
    """
    if not secret:
        logger.warning(
            "DB_ENCRYPTION_KEY not set, using default key (NOT SECURE FOR PRODUCTION). "
            'Generate one with: python -c "import secrets; print(secrets.token_hex(32))"'
        )
        return _scrypt(FALLBACK_PASSPHRASE, FALLBACK_SALT), KEY_SOURCE_FALLBACK

    if _HEX_KEY_PATTERN.match(secret):
        return bytes.fromhex(secret), KEY_SOURCE_HEX

    return _scrypt(secret.encode("utf-8"), PASSPHRASE_SALT), KEY_SOURCE_PASSPHRASE


class FieldEncryptionService(IFieldCipher):
    """
    Encrypts and decrypts individual string values.

    Counters are plain increments for the periodic audit line; an occasional
    lost update under concurrency is acceptable.
    """

    def __init__(self, key: bytes, key_source: str = KEY_SOURCE_HEX, audit_every: int = 100):
        if len(key) != KEY_LENGTH:
            raise ValueError(f"Encryption key must be {KEY_LENGTH} bytes, got {len(key)}")
        self._aesgcm = AESGCM(key)
        self.key_source = key_source
        self.audit_every = audit_every
        self.encryption_count = 0
        self.decryption_count = 0

    @classmethod
    def from_settings(cls, settings) -> "FieldEncryptionService":
        secret = settings.DB_ENCRYPTION_KEY.get_secret_value() if settings.DB_ENCRYPTION_KEY else None
        key, source = derive_key(secret)
        service = cls(key, key_source=source, audit_every=settings.ENCRYPTION_AUDIT_EVERY)
        logger.info(f"Field encryption initialized: algorithm={ALGORITHM} key_source={source}")
        return service

    # ———— ENCRYPTION ————

    def encrypt(self, plaintext: str) -> str:
        """
        Encrypt a string into an ``iv:tag:ciphertext`` envelope.

        Raises:
            EncryptionException: If the value is not a string or the cipher fails
        """
        if not isinstance(plaintext, str):
            raise EncryptionException("Only string values can be encrypted.")

        try:
            iv = secrets.token_bytes(IV_LENGTH)
            sealed = self._aesgcm.encrypt(iv, plaintext.encode("utf-8"), ASSOCIATED_DATA)
        except Exception as e:
            logger.error(f"Encryption failed: {type(e).__name__}")
            log_security_event("DATABASE_ENCRYPTION_FAILED", AuditSeverity.HIGH, {"error": type(e).__name__})
            raise EncryptionException() from e

        # AESGCM appends the tag to the ciphertext
        ciphertext, tag = sealed[:-TAG_LENGTH], sealed[-TAG_LENGTH:]

        self.encryption_count += 1
        self._audit("DATABASE_ENCRYPTION_PERFORMED", self.encryption_count, len(plaintext))

        return ENVELOPE_SEPARATOR.join((iv.hex(), tag.hex(), ciphertext.hex()))

    def encrypt_value(self, plaintext: str) -> EncryptedValue:
        return EncryptedValue(self.encrypt(plaintext))

    # ———— DECRYPTION ————

    def decrypt(self, envelope: Union[str, EncryptedValue]) -> str:
        """
        Decrypt an envelope produced by :meth:`encrypt`.

        Raises:
            DecryptionException: If the envelope is malformed or the tag does not verify
        """
        raw = envelope.envelope if isinstance(envelope, EncryptedValue) else envelope
        if not isinstance(raw, str):
            raise DecryptionException("Invalid encrypted data format.")

        parts = raw.split(ENVELOPE_SEPARATOR)
        if len(parts) != 3:
            self._decryption_failed("malformed envelope")

        try:
            iv = bytes.fromhex(parts[0])
            tag = bytes.fromhex(parts[1])
            ciphertext = bytes.fromhex(parts[2])
        except ValueError:
            self._decryption_failed("non-hex envelope segment")

        if len(iv) not in ACCEPTED_IV_LENGTHS or len(tag) != TAG_LENGTH:
            self._decryption_failed("bad iv or tag length")

        try:
            plaintext = self._aesgcm.decrypt(iv, ciphertext + tag, ASSOCIATED_DATA).decode("utf-8")
        except InvalidTag:
            self._decryption_failed("authentication tag mismatch")
        except UnicodeDecodeError:
            self._decryption_failed("plaintext is not valid UTF-8")

        self.decryption_count += 1
        self._audit("DATABASE_DECRYPTION_PERFORMED", self.decryption_count, len(plaintext))
        return plaintext

    def is_encrypted(self, value: Any) -> bool:
        """
        Heuristic shape check: three hex segments with the expected IV and tag sizes.

        A plaintext that happens to have this shape is misclassified; prefer
        ``EncryptedValue`` wherever the type is known.
        """
        if isinstance(value, EncryptedValue):
            return True
        return isinstance(value, str) and bool(_ENVELOPE_PATTERN.match(value))

    def get_stats(self) -> Dict[str, Any]:
        return {
            "algorithm": ALGORITHM,
            "key_length": KEY_LENGTH * 8,
            "key_source": self.key_source,
            "encryption_count": self.encryption_count,
            "decryption_count": self.decryption_count,
        }

    # ———— INTERNALS ————

    def _audit(self, event: str, count: int, data_length: int) -> None:
        if self.audit_every and count % self.audit_every == 0:
            log_security_event(event, AuditSeverity.LOW, {"count": count, "data_length": data_length})

    @staticmethod
    def _decryption_failed(reason: str) -> None:
        logger.error(f"Decryption failed: {reason}")
        log_security_event("DATABASE_DECRYPTION_FAILED", AuditSeverity.HIGH, {"reason": reason})
        raise DecryptionException()
