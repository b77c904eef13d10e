# app/application/use_cases/encryption_use_cases.py

import logging
from typing import Optional

from app.adapters.outbound.security.field_encryption import KEY_SOURCE_FALLBACK
from app.application.dtos.encryption_dto import EncryptionStatus, EncryptionTestResult
from app.application.ports.outbound import IFieldCipher
from app.domain.exceptions import DecryptionException, EncryptionException
from app.domain.models.identity_claims import IdentityClaims
from app.shared.utils.audit_logger import AuditSeverity, log_security_event

logger = logging.getLogger(__name__)

DEFAULT_TEST_SAMPLE = "encryption-self-test"


class EncryptionAdminService:
    """Status and self-test of the field encryption service, for administrators."""

    def __init__(self, cipher: IFieldCipher):
        self.cipher = cipher

    def get_status(self) -> EncryptionStatus:
        stats = self.cipher.get_stats()
        return EncryptionStatus(secure=stats["key_source"] != KEY_SOURCE_FALLBACK, **stats)

    def run_self_test(self, claims: IdentityClaims, sample: Optional[str] = None) -> EncryptionTestResult:
        """
        Encrypt and decrypt ``sample`` (or a fixed default).

        The envelope itself is never returned, only its shape and whether the
        round trip matched.
        """
        plaintext = sample if sample is not None else DEFAULT_TEST_SAMPLE
        try:
            envelope = self.cipher.encrypt_value(plaintext)
            matches = self.cipher.decrypt(envelope) == plaintext
        except (EncryptionException, DecryptionException) as e:
            logger.error(f"Encryption self-test failed: {e.message}")
            log_security_event("ENCRYPTION_TEST_FAILED", AuditSeverity.HIGH, {"user_id": claims.user_id})
            return EncryptionTestResult(success=False, envelope_parts=0, round_trip_matches=False)

        log_security_event("ENCRYPTION_TEST_PERFORMED", AuditSeverity.LOW, {"user_id": claims.user_id})
        return EncryptionTestResult(
            success=matches,
            envelope_parts=len(envelope.parts),
            round_trip_matches=matches,
        )
