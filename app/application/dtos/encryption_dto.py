# app/application/dtos/encryption_dto.py

from typing import Optional

from pydantic import Field

from app.application.dtos.base_dto import CustomBaseModel


class EncryptionStatus(CustomBaseModel):
    algorithm: str
    key_length: int = Field(..., description="Key size in bits.")
    key_source: str = Field(..., description="hex, passphrase or insecure-fallback.")
    secure: bool = Field(..., description="False when the insecure fallback key is in use.")
    encryption_count: int
    decryption_count: int


class EncryptionTestRequest(CustomBaseModel):
    sample: Optional[str] = Field(None, max_length=4096, description="Value to round-trip; a default is used if omitted.")


class EncryptionTestResult(CustomBaseModel):
    success: bool
    envelope_parts: int = Field(..., description="Number of segments in the produced envelope.")
    round_trip_matches: bool
