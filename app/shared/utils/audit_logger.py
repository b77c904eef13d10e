# app/shared/utils/audit_logger.py

"""
Security audit logging.

Security-relevant events (logins, revocations, encryption statistics) are
written to a dedicated ``audit`` logger so they can be routed separately from
application logs. Never pass secrets, passwords or raw tokens in ``details``.
"""

import logging
from enum import Enum
from typing import Any, Dict, Optional

from app.shared.utils.datetime_utils import DateTimeUtil

audit_logger = logging.getLogger("audit")


class AuditSeverity(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


_LEVELS = {
    AuditSeverity.LOW: logging.INFO,
    AuditSeverity.MEDIUM: logging.WARNING,
    AuditSeverity.HIGH: logging.ERROR,
    AuditSeverity.CRITICAL: logging.CRITICAL,
}


def log_security_event(
        event_type: str,
        severity: AuditSeverity = AuditSeverity.LOW,
        details: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Emit one audit record and return it.

    Args:
        event_type: Stable event name, e.g. ``LOGIN_FAILED``
        severity: Audit severity, mapped onto a logging level
        details: Extra non-sensitive context
    """
    record = {
        "event": event_type,
        "severity": severity.value,
        "timestamp": DateTimeUtil.utcnow().isoformat(),
        **(details or {}),
    }
    audit_logger.log(_LEVELS[severity], f"[AUDIT] {event_type}", extra={"audit": record})
    return record
