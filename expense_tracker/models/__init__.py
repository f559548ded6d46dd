"""
Data Models Package

This package contains all Pydantic models used in the Expense Tracker.
All data flowing through the core must conform to these schemas.
"""

from expense_tracker.models.base import RecordMetadata, utc_now
from expense_tracker.models.user import User
from expense_tracker.models.expense import (
    DATE_FORMAT,
    DATE_FORMAT_LABEL,
    Expense,
    ExpenseCategory,
    ExpenseUpdate,
    parse_expense_date,
)
from expense_tracker.models.auth import CallerIdentity, TokenClaims
from expense_tracker.models.validation import ValidationIssue
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Records
    "RecordMetadata",
    "User",
    "Expense",
    "ExpenseCategory",
    "ExpenseUpdate",
    "DATE_FORMAT",
    "DATE_FORMAT_LABEL",
    "parse_expense_date",
    "utc_now",
    # Identity
    "CallerIdentity",
    "TokenClaims",
    # Validation
    "ValidationIssue",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
