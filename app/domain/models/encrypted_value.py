# app/domain/models/encrypted_value.py

from dataclasses import dataclass

ENVELOPE_SEPARATOR = ":"


@dataclass(frozen=True)
class EncryptedValue:
    """
    A stored ciphertext envelope (``iv:tag:ciphertext``, hex encoded).

    Columns holding encrypted data are read into this type, so the data-access
    layer knows a value is encrypted by its type rather than by sniffing its
    shape.
    """

    envelope: str

    def __str__(self) -> str:
        return self.envelope

    def __repr__(self) -> str:
        return "EncryptedValue(<redacted>)"

    @property
    def parts(self):
        return self.envelope.split(ENVELOPE_SEPARATOR)
