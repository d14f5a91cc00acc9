import logging
from collections.abc import Mapping
from typing import Any
from uuid import UUID

from bondarys_identity.application.ports import AuditTrail

AUDIT_LOGGER_NAME = "bondarys.audit"


class LoggingAuditTrail(AuditTrail):
    """Writes audit events to a dedicated logger.

    Where the records end up (file, SIEM, ...) is decided by logging config.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(AUDIT_LOGGER_NAME)

    def record(
        self,
        event: str,
        operator_id: UUID,
        target_id: UUID | None = None,
        details: Mapping[str, Any] | None = None,
    ) -> None:
        self._logger.info(
            "%s operator=%s target=%s details=%s",
            event,
            operator_id,
            target_id,
            dict(details or {}),
        )
