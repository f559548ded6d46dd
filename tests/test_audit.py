"""Tests for the audit logger."""

from expense_tracker.audit import AuditLogger
from expense_tracker.models import AuditEventBuilder


class TestAuditLogger:
    """Tests for AuditLogger."""

    async def test_log_returns_true(self):
        """Test that a well-formed event is written."""
        logger = AuditLogger()
        assert await logger.log(AuditEventBuilder.expense_deleted(1, 1)) is True

    async def test_logging_failure_does_not_raise(self, monkeypatch):
        """Test that a broken log sink never breaks the audited operation."""
        logger = AuditLogger()

        class BrokenLogger:
            def info(self, *args, **kwargs):
                raise RuntimeError("disk full")

        monkeypatch.setattr(logger, "_logger", BrokenLogger())
        assert await logger.log(AuditEventBuilder.user_registered(1)) is False

    async def test_helpers(self):
        """Test that every helper runs without raising."""
        logger = AuditLogger()
        await logger.log_user_registered(1)
        await logger.log_login_succeeded(1)
        await logger.log_login_failed("bad_password", 1)
        await logger.log_account_deleted(1)
        await logger.log_expense_created(1, 1, "Groceries")
        await logger.log_expense_updated(1, 1, ["title"])
        await logger.log_access_denied(1, 2, "read")
        await logger.log_query_executed(1, "week", 0)
        await logger.log_error("StorageError", "boom")
