"""
Expense Query Engine

Date-window and category filters over one caller's expenses.

DESIGN DECISION: Filtering is done in process over the caller's full
owned set, read through LedgerService.list_owned(). Storage is never
asked to filter, so ownership is enforced in exactly one place.

GUARANTEES:
- Only the caller's own expenses are ever considered
- A stored row whose date cannot be parsed is skipped and logged,
  never surfaced as an error
- An empty result is NotFound, never an empty list
"""

from datetime import datetime, time, timedelta
from typing import Any, Callable, Optional

import structlog

from expense_tracker.audit import AuditLogger
from expense_tracker.exceptions import NotFound, ValidationError
from expense_tracker.models import DATE_FORMAT_LABEL, Expense, ValidationIssue, parse_expense_date
from expense_tracker.services.auth import Clock, utc_clock
from expense_tracker.services.ledger import LedgerService


logger = structlog.get_logger(__name__)


WEEK_DAYS = 7
MONTH_DAYS = 30
QUARTER_DAYS = 90


class ExpenseQueryEngine:
    """
    Runs the fixed set of expense queries for a resolved caller.

    Rolling windows (week, month, quarter) are half-open: an expense is
    included when its date, taken as midnight in the timezone of `now`,
    is strictly after `now - N days` and not after `now`.
    """

    def __init__(
        self,
        ledger: LedgerService,
        audit_logger: Optional[AuditLogger] = None,
        clock: Optional[Clock] = None,
    ):
        self._ledger = ledger
        self._audit_logger = audit_logger
        self._clock = clock or utc_clock

    async def by_week(self, caller_id: int, now: Optional[datetime] = None) -> list[Expense]:
        return await self._rolling_window(
            caller_id, WEEK_DAYS, now, "week", "No expenses found for the past week"
        )

    async def by_month(self, caller_id: int, now: Optional[datetime] = None) -> list[Expense]:
        return await self._rolling_window(
            caller_id, MONTH_DAYS, now, "month", "No expenses found for the past month"
        )

    async def by_quarter(self, caller_id: int, now: Optional[datetime] = None) -> list[Expense]:
        return await self._rolling_window(
            caller_id, QUARTER_DAYS, now, "quarter", "No expenses found for the past three month"
        )

    async def by_custom_range(
        self,
        caller_id: int,
        start_date: Any,
        end_date: Any,
    ) -> list[Expense]:
        """
        Expenses dated between start_date and end_date, both inclusive.

        Both bounds are DD/MM/YYYY strings.

        Raises:
            ValidationError: A bound is missing or not DD/MM/YYYY
            NotFound: Nothing in range
        """
        if not _present(start_date) or not _present(end_date):
            raise ValidationError(
                "Both start_date and end_date query parameters are required.",
                issues=[
                    ValidationIssue(
                        field=field,
                        issue_type="missing",
                        message=f"{field} is required",
                    )
                    for field, value in (("start_date", start_date), ("end_date", end_date))
                    if not _present(value)
                ],
            )

        try:
            start = parse_expense_date(start_date)
            end = parse_expense_date(end_date)
        except ValueError:
            raise ValidationError(f"Invalid date format. Please use {DATE_FORMAT_LABEL}.")

        def in_range(expense: Expense) -> bool:
            expense_date = _parse_or_skip(expense)
            if expense_date is None:
                return False
            return not expense_date < start and not expense_date > end

        return await self._run(
            caller_id,
            in_range,
            "custom_range",
            "No expenses found for the specified date range.",
        )

    async def by_category(self, caller_id: int, category: Any) -> list[Expense]:
        """
        Expenses whose category exactly matches `category`.

        A category outside the known set simply matches nothing.
        """
        if not _present(category):
            raise ValidationError(
                "category query parameter is required.",
                issues=[ValidationIssue(
                    field="category",
                    issue_type="missing",
                    message="category is required",
                )],
            )

        return await self._run(
            caller_id,
            lambda expense: expense.category.value == category,
            "category",
            "No expenses found for the specified category.",
        )

    async def _rolling_window(
        self,
        caller_id: int,
        days: int,
        now: Optional[datetime],
        query_type: str,
        empty_message: str,
    ) -> list[Expense]:
        now = now or self._clock()
        cutoff = now - timedelta(days=days)

        def in_window(expense: Expense) -> bool:
            expense_date = _parse_or_skip(expense)
            if expense_date is None:
                return False
            moment = datetime.combine(expense_date, time.min, tzinfo=now.tzinfo)
            return cutoff < moment <= now

        return await self._run(caller_id, in_window, query_type, empty_message)

    async def _run(
        self,
        caller_id: int,
        predicate: Callable[[Expense], bool],
        query_type: str,
        empty_message: str,
    ) -> list[Expense]:
        owned = await self._ledger.list_owned(caller_id)
        results = [expense for expense in owned if predicate(expense)]

        if self._audit_logger:
            await self._audit_logger.log_query_executed(caller_id, query_type, len(results))

        if not results:
            raise NotFound(empty_message)
        return results


def _present(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _parse_or_skip(expense: Expense):
    try:
        return expense.parsed_date()
    except ValueError:
        logger.warning(
            "expense_date_unparseable",
            expense_id=expense.id,
            date=expense.date,
        )
        return None
