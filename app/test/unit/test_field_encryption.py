# app/test/unit/test_field_encryption.py

# pytest app/test/unit/test_field_encryption.py -v

"""
Criptografia de campos: AES-256-GCM com envelope ``iv:tag:ciphertext``.
"""

import logging
import secrets

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from app.adapters.outbound.security import field_encryption
from app.adapters.outbound.security.field_encryption import (
    FieldEncryptionService,
    KEY_SOURCE_FALLBACK,
    KEY_SOURCE_HEX,
    KEY_SOURCE_PASSPHRASE,
    derive_key,
)
from app.domain.exceptions import DecryptionException, EncryptionException
from app.domain.models.encrypted_value import EncryptedValue

HEX_KEY = "00112233445566778899aabbccddeeff" * 2


@pytest.fixture
def service() -> FieldEncryptionService:
    key, source = derive_key(HEX_KEY)
    return FieldEncryptionService(key, key_source=source, audit_every=100)


def _flip_hex(segment: str) -> str:
    return ("1" if segment[0] == "0" else "0") + segment[1:]


@pytest.mark.parametrize("plaintext", ["+1 555 0100", "", "ção 😀 ünïcode", "x" * 5000])
def test_round_trip(service, plaintext):
    envelope = service.encrypt(plaintext)

    assert service.decrypt(envelope) == plaintext


def test_envelope_format(service):
    envelope = service.encrypt("hello")
    iv, tag, ciphertext = envelope.split(":")

    assert len(iv) == 24  # 12 bytes
    assert len(tag) == 32  # 16 bytes
    assert len(ciphertext) == len("hello") * 2
    assert all(c in "0123456789abcdef" for c in iv + tag + ciphertext)


def test_same_plaintext_gives_different_envelopes(service):
    first = service.encrypt("same value")
    second = service.encrypt("same value")

    assert first != second
    assert first.split(":")[0] != second.split(":")[0]


@pytest.mark.parametrize("index", [0, 1, 2])
def test_tampering_any_segment_fails_closed(service, index):
    parts = service.encrypt("sensitive").split(":")
    parts[index] = _flip_hex(parts[index])

    with pytest.raises(DecryptionException):
        service.decrypt(":".join(parts))


@pytest.mark.parametrize("envelope", [
    "not-encrypted",
    "a:b",
    "a:b:c:d",
    "zz:zz:zz",
    "00:00:00",
])
def test_malformed_envelopes_fail_closed(service, envelope):
    with pytest.raises(DecryptionException):
        service.decrypt(envelope)


def test_decrypt_with_other_key_fails(service):
    envelope = service.encrypt("secret")
    other = FieldEncryptionService(secrets.token_bytes(32))

    with pytest.raises(DecryptionException):
        other.decrypt(envelope)


def test_decrypt_failure_does_not_update_counter(service):
    with pytest.raises(DecryptionException):
        service.decrypt("a:b:c")

    assert service.decryption_count == 0


def test_encrypt_rejects_non_strings(service):
    with pytest.raises(EncryptionException):
        service.encrypt(12345)


def test_encrypt_value_wraps_envelope(service):
    value = service.encrypt_value("wrapped")

    assert isinstance(value, EncryptedValue)
    assert len(value.parts) == 3
    assert service.decrypt(value) == "wrapped"
    assert "wrapped" not in repr(value)


def test_is_encrypted_heuristic(service):
    envelope = service.encrypt("value")

    assert service.is_encrypted(envelope)
    assert service.is_encrypted(EncryptedValue(envelope))
    assert not service.is_encrypted("value")
    assert not service.is_encrypted("12:34:56")
    assert not service.is_encrypted(None)
    assert not service.is_encrypted(42)


def _legacy_envelope(plaintext: str, iv_length: int = 16) -> str:
    """Envelope no formato gravado pelo backend anterior (IV de 16 bytes)."""
    key, _ = derive_key(HEX_KEY)
    iv = secrets.token_bytes(iv_length)
    sealed = AESGCM(key).encrypt(iv, plaintext.encode("utf-8"), field_encryption.ASSOCIATED_DATA)
    ciphertext, tag = sealed[:-16], sealed[-16:]
    return ":".join((iv.hex(), tag.hex(), ciphertext.hex()))


def test_decrypts_envelope_with_16_byte_iv(service):
    envelope = _legacy_envelope("555-0100")

    assert service.is_encrypted(envelope)
    assert service.decrypt(envelope) == "555-0100"


def test_new_envelopes_still_use_12_byte_iv(service):
    iv = service.encrypt("555-0100").split(":")[0]

    assert len(iv) == field_encryption.IV_LENGTH * 2


@pytest.mark.parametrize("iv_length", [8, 15, 32])
def test_other_iv_lengths_are_rejected(service, iv_length):
    envelope = _legacy_envelope("555-0100", iv_length=iv_length)

    assert not service.is_encrypted(envelope)
    with pytest.raises(DecryptionException):
        service.decrypt(envelope)


def test_derive_key_from_hex():
    key, source = derive_key(HEX_KEY)

    assert source == KEY_SOURCE_HEX
    assert key == bytes.fromhex(HEX_KEY)


def test_derive_key_from_passphrase_is_deterministic():
    key_1, source = derive_key("correct horse battery staple")
    key_2, _ = derive_key("correct horse battery staple")

    assert source == KEY_SOURCE_PASSPHRASE
    assert len(key_1) == 32
    assert key_1 == key_2
    assert key_1 != derive_key("another passphrase")[0]


def test_derive_key_fallback_logs_warning(caplog):
    with caplog.at_level(logging.WARNING, logger=field_encryption.__name__):
        key, source = derive_key(None)

    assert source == KEY_SOURCE_FALLBACK
    assert len(key) == 32
    assert key == derive_key("")[0]
    assert "NOT SECURE" in caplog.text


def test_fallback_envelopes_are_portable_between_instances():
    first = FieldEncryptionService(*derive_key(None))
    second = FieldEncryptionService(*derive_key(None))

    assert second.decrypt(first.encrypt("shared")) == "shared"


def test_key_must_be_32_bytes():
    with pytest.raises(ValueError):
        FieldEncryptionService(b"short")


def test_stats(service):
    service.decrypt(service.encrypt("a"))
    service.encrypt("b")

    stats = service.get_stats()

    assert stats == {
        "algorithm": "aes-256-gcm",
        "key_length": 256,
        "key_source": KEY_SOURCE_HEX,
        "encryption_count": 2,
        "decryption_count": 1,
    }


def test_audit_event_every_nth_call(monkeypatch):
    events = []
    monkeypatch.setattr(
        field_encryption, "log_security_event",
        lambda event, severity=None, details=None: events.append((event, details)),
    )
    service = FieldEncryptionService(bytes.fromhex(HEX_KEY), audit_every=3)

    for _ in range(7):
        service.encrypt("value")

    assert [e for e, _ in events] == ["DATABASE_ENCRYPTION_PERFORMED"] * 2
    assert [d["count"] for _, d in events] == [3, 6]
    # Só contagem e tamanho, nunca o valor em claro
    assert all(set(d) == {"count", "data_length"} for _, d in events)


def test_from_settings_uses_configured_key():
    class FakeSettings:
        DB_ENCRYPTION_KEY = None
        ENCRYPTION_AUDIT_EVERY = 10

    service = FieldEncryptionService.from_settings(FakeSettings)

    assert service.key_source == KEY_SOURCE_FALLBACK
    assert service.audit_every == 10
