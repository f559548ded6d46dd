"""
Audit Logger

Every account and ledger mutation is logged as a structured AuditEvent.

The audit logger:
- Is async so it can sit in the same call chain as the services
- Never raises into the operation it records
- Never receives secrets (events are built by AuditEventBuilder)
"""

import logging
from typing import Optional

import structlog

from expense_tracker.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog's JSON lines through the stdlib root logger."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level.upper()))


class AuditLogger:
    """
    Central audit logging service.

    Logs events to the structured local log.
    """

    def __init__(self):
        self._logger = structlog.get_logger("expense_tracker.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was written.
        """
        log_dict = event.to_log_dict()

        try:
            if event.severity.value in ("error", "critical"):
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Audit failures must not break the main flow
            logging.getLogger(__name__).error("audit logging failed: %s", e)
            return False

        return True

    async def log_user_registered(self, user_id: int) -> None:
        await self.log(AuditEventBuilder.user_registered(user_id))

    async def log_login_succeeded(self, user_id: int) -> None:
        await self.log(AuditEventBuilder.login_succeeded(user_id))

    async def log_login_failed(self, reason: str, user_id: Optional[int] = None) -> None:
        await self.log(AuditEventBuilder.login_failed(reason, user_id))

    async def log_account_deleted(self, user_id: int) -> None:
        await self.log(AuditEventBuilder.account_deleted(user_id))

    async def log_expense_created(self, expense_id: int, user_id: int, category: str) -> None:
        await self.log(AuditEventBuilder.expense_created(expense_id, user_id, category))

    async def log_expense_updated(self, expense_id: int, user_id: int, fields: list[str]) -> None:
        await self.log(AuditEventBuilder.expense_updated(expense_id, user_id, fields))

    async def log_expense_deleted(self, expense_id: int, user_id: int) -> None:
        await self.log(AuditEventBuilder.expense_deleted(expense_id, user_id))

    async def log_access_denied(self, expense_id: int, caller_id: int, operation: str) -> None:
        await self.log(AuditEventBuilder.access_denied(expense_id, caller_id, operation))

    async def log_query_executed(self, user_id: int, query_type: str, result_count: int) -> None:
        await self.log(AuditEventBuilder.query_executed(user_id, query_type, result_count))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
    ) -> None:
        """Log an error."""
        await self.log(AuditEventBuilder.system_error(error_type, error_message, details))
