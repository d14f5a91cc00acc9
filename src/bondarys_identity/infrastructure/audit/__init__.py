from bondarys_identity.infrastructure.audit.logging_audit_trail import (
    AUDIT_LOGGER_NAME,
    LoggingAuditTrail,
)

__all__ = [
    "AUDIT_LOGGER_NAME",
    "LoggingAuditTrail",
]
