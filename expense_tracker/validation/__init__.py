"""Validation package."""

from expense_tracker.validation.validator import (
    REQUIRED_FIELDS_MESSAGE,
    CredentialValidator,
    ExpenseValidator,
    issues_from_pydantic,
    raise_for_issues,
    safe_decimal,
)

__all__ = [
    "REQUIRED_FIELDS_MESSAGE",
    "CredentialValidator",
    "ExpenseValidator",
    "issues_from_pydantic",
    "raise_for_issues",
    "safe_decimal",
]
