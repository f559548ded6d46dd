"""
Error taxonomy for the expense tracker core.

Every error a core operation raises is an ExpenseTrackerError. Each kind
carries the HTTP status the transport layer answers with, so the mapping
lives next to the error instead of in every route.

Storage failures are defined with the storage interface
(expense_tracker.services.storage.interface) and subclass the same base.
"""

from typing import Optional

from expense_tracker.models.validation import ValidationIssue


class ExpenseTrackerError(Exception):
    """Base exception for all core operations."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict:
        """User-visible error body. Never includes internal details."""
        return {"message": self.message}


class ValidationError(ExpenseTrackerError):
    """Bad or missing input."""

    status_code = 400
    default_message = "Invalid input"

    def __init__(
        self,
        message: Optional[str] = None,
        issues: Optional[list[ValidationIssue]] = None,
    ):
        self.issues = list(issues or [])
        if message is None and self.issues:
            message = self.issues[0].message
        super().__init__(message)

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.issues:
            body["issues"] = [
                {"field": issue.field, "message": issue.message}
                for issue in self.issues
            ]
        return body


class Unauthorized(ExpenseTrackerError):
    """Caller identity could not be established."""

    status_code = 401
    default_message = "Unauthorized"


class MissingToken(Unauthorized):
    default_message = "authorization header is missing"


class MalformedHeader(Unauthorized):
    default_message = "invalid authorization header format"


class InvalidToken(Unauthorized):
    default_message = "invalid token"


class TokenExpired(Unauthorized):
    default_message = "token has expired"


class InvalidCredentials(Unauthorized):
    default_message = "Invalid email or password"


class Forbidden(ExpenseTrackerError):
    """Valid identity, but the record belongs to someone else."""

    status_code = 403
    default_message = "Unauthorized access to expense"


class NotFound(ExpenseTrackerError):
    """No such resource, or an empty filtered result."""

    status_code = 404
    default_message = "Not found"


class AccountNotFound(NotFound):
    default_message = "Account does not exist"


class DuplicateEmail(ExpenseTrackerError):
    status_code = 409
    default_message = "Email is already registered"


class SigningError(ExpenseTrackerError):
    """Token could not be signed or checked because the secret is unavailable."""

    status_code = 500
    default_message = "Token signing is not available"
