"""Unit tests for LoggingAuditTrail."""

from unittest.mock import Mock
from uuid import UUID

from bondarys_identity.infrastructure.audit import LoggingAuditTrail

OPERATOR = UUID("00000000-0000-0000-0000-000000000001")
TARGET = UUID("aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa")


class TestLoggingAuditTrail:
    def test_record_writes_one_line(self):
        logger = Mock()
        audit = LoggingAuditTrail(logger)

        audit.record(
            "impersonation.request",
            operator_id=OPERATOR,
            target_id=TARGET,
            details={"method": "GET", "path": "/api/v1/auth/me"},
        )

        logger.info.assert_called_once_with(
            "%s operator=%s target=%s details=%s",
            "impersonation.request",
            OPERATOR,
            TARGET,
            {"method": "GET", "path": "/api/v1/auth/me"},
        )

    def test_default_logger(self, caplog):
        audit = LoggingAuditTrail()

        with caplog.at_level("INFO", logger="bondarys.audit"):
            audit.record("impersonation.stopped", operator_id=OPERATOR)

        assert caplog.records[-1].name == "bondarys.audit"
        assert "target=None" in caplog.records[-1].getMessage()
