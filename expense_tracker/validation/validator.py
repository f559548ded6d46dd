"""
Input Validation

Validators collect every problem with a payload as ValidationIssue
entries instead of stopping at the first one. Callers turn a non-empty
list into a ValidationError with raise_for_issues().

IMPORTANT: Validation NEVER silently fixes input. A value is either
accepted as given (after whitespace trimming) or reported.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from expense_tracker.exceptions import ValidationError
from expense_tracker.models import (
    DATE_FORMAT_LABEL,
    ExpenseCategory,
    ExpenseUpdate,
    ValidationIssue,
    parse_expense_date,
)


REQUIRED_FIELDS_MESSAGE = "All fields are required."


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _missing(field: str) -> ValidationIssue:
    return ValidationIssue(
        field=field,
        issue_type="missing",
        message=f"{field} is required",
    )


def safe_decimal(value: Any) -> Optional[Decimal]:
    """Convert a request value to a finite Decimal, or None if it isn't one."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result


def issues_from_pydantic(error: PydanticValidationError) -> list[ValidationIssue]:
    """Translate a pydantic ValidationError into our issue list."""
    issues = []
    for detail in error.errors():
        field = ".".join(str(part) for part in detail.get("loc", ())) or "body"
        issues.append(ValidationIssue(
            field=field,
            issue_type=detail.get("type", "invalid_value"),
            message=f"{field}: {detail.get('msg', 'invalid value')}",
        ))
    return issues


def raise_for_issues(
    issues: list[ValidationIssue],
    message: Optional[str] = None,
) -> None:
    """Raise ValidationError if any error-level issue is present."""
    errors = [issue for issue in issues if issue.severity == "error"]
    if not errors:
        return
    if message is None and any(issue.issue_type == "missing" for issue in errors):
        message = REQUIRED_FIELDS_MESSAGE
    raise ValidationError(message, issues=errors)


class ExpenseValidator:
    """Checks expense payloads before they reach storage."""

    def _check_date(self, value: str) -> Optional[ValidationIssue]:
        try:
            parse_expense_date(value)
        except ValueError:
            return ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Invalid date format. Please use {DATE_FORMAT_LABEL}.",
                suggested_fix="e.g. 31/01/2024",
            )
        return None

    def _check_category(self, value: str) -> Optional[ValidationIssue]:
        if value not in ExpenseCategory.values():
            return ValidationIssue(
                field="category",
                issue_type="invalid_value",
                message="Invalid category provided",
                suggested_fix=f"Use one of: {', '.join(ExpenseCategory.values())}",
            )
        return None

    def validate_new(
        self,
        title: Any,
        description: Any,
        amount: Any,
        date: Any,
        category: Any,
    ) -> list[ValidationIssue]:
        """
        Validate a new expense.

        Checks:
        - title, description, date, category present and non-empty
        - amount numeric and strictly positive
        - date in DD/MM/YYYY
        - category in the closed set (exact, case-sensitive match)
        """
        issues = []

        for field, value in (
            ("title", title),
            ("description", description),
            ("date", date),
            ("category", category),
        ):
            if _is_blank(value):
                issues.append(_missing(field))
            elif not isinstance(value, str):
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="invalid_type",
                    message=f"{field} must be a string",
                ))

        if amount is None:
            issues.append(_missing("amount"))
        else:
            parsed = safe_decimal(amount)
            if parsed is None:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_format",
                    message="Amount must be a number",
                ))
            elif parsed <= 0:
                issues.append(ValidationIssue(
                    field="amount",
                    issue_type="invalid_value",
                    message="Amount must be greater than zero",
                ))

        if isinstance(date, str) and date.strip():
            date_issue = self._check_date(date)
            if date_issue:
                issues.append(date_issue)

        if isinstance(category, str) and category.strip():
            category_issue = self._check_category(category.strip())
            if category_issue:
                issues.append(category_issue)

        return issues

    def validate_update(self, changes: ExpenseUpdate) -> list[ValidationIssue]:
        """
        Validate the supplied fields of a partial update.

        Fields that count as "not supplied" are not checked.
        """
        issues = []
        supplied = changes.supplied_fields()

        if "amount" in supplied and supplied["amount"] < 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
            ))

        if "date" in supplied:
            date_issue = self._check_date(supplied["date"])
            if date_issue:
                issues.append(date_issue)

        if "category" in supplied:
            category_issue = self._check_category(supplied["category"])
            if category_issue:
                issues.append(category_issue)

        return issues


class CredentialValidator:
    """Checks registration and login payloads."""

    def validate_registration(
        self,
        first_name: Any,
        last_name: Any,
        email: Any,
        password: Any,
    ) -> list[ValidationIssue]:
        issues = []
        for field, value in (
            ("firstName", first_name),
            ("lastName", last_name),
            ("email", email),
            ("password", password),
        ):
            if _is_blank(value):
                issues.append(_missing(field))
            elif not isinstance(value, str):
                issues.append(ValidationIssue(
                    field=field,
                    issue_type="invalid_type",
                    message=f"{field} must be a string",
                ))
        return issues

    def validate_login(self, email: Any, password: Any) -> list[ValidationIssue]:
        issues = []
        for field, value in (("email", email), ("password", password)):
            if _is_blank(value) or not isinstance(value, str):
                issues.append(_missing(field))
        return issues
