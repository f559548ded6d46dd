"""Expense query package."""

from expense_tracker.queries.filters import (
    MONTH_DAYS,
    QUARTER_DAYS,
    WEEK_DAYS,
    ExpenseQueryEngine,
)

__all__ = ["ExpenseQueryEngine", "MONTH_DAYS", "QUARTER_DAYS", "WEEK_DAYS"]
