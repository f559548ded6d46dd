"""
Expense Ledger Service

Create, read, update and delete expense records on behalf of a caller
whose identity has already been resolved.

GUARANTEES:
- The owner of a new expense is always the caller, never a value from
  the payload
- get/update/delete check existence first, then ownership: a missing id
  is NotFound, someone else's id is Forbidden
- An expense is never returned, changed or removed for a non-owner

Updates are fetch-check-merge-save with no lock; two concurrent updates
of the same expense resolve as last writer wins.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.exceptions import Forbidden, NotFound, Unauthorized, ValidationError
from expense_tracker.models import Expense, ExpenseCategory, ExpenseUpdate
from expense_tracker.services.storage import ExpenseStorageInterface, StorageError
from expense_tracker.validation import (
    ExpenseValidator,
    issues_from_pydantic,
    raise_for_issues,
    safe_decimal,
)


def _require_caller(caller_id: Any) -> int:
    if isinstance(caller_id, bool) or not isinstance(caller_id, int) or caller_id <= 0:
        raise Unauthorized("Unauthorized")
    return caller_id


class LedgerService:

    def __init__(
        self,
        expenses: ExpenseStorageInterface,
        validator: Optional[ExpenseValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._expenses = expenses
        self._validator = validator or ExpenseValidator()
        self._audit_logger = audit_logger

    async def create(
        self,
        caller_id: int,
        title: Any,
        description: Any,
        amount: Any,
        date: Any,
        category: Any,
    ) -> Expense:
        """
        Create an expense owned by the caller.

        Raises:
            ValidationError: Missing field, non-positive amount, bad date
                or category outside the closed set
        """
        caller_id = _require_caller(caller_id)
        raise_for_issues(
            self._validator.validate_new(title, description, amount, date, category)
        )

        try:
            expense = Expense(
                title=title,
                description=description,
                amount=safe_decimal(amount),
                date=date,
                category=ExpenseCategory(category.strip()),
                user_id=caller_id,
            )
        except PydanticValidationError as e:
            raise ValidationError(issues=issues_from_pydantic(e))

        stored = await self._expenses.insert(expense)
        if self._audit_logger:
            await self._audit_logger.log_expense_created(
                stored.id, caller_id, stored.category.value
            )
        return stored

    async def _get_owned(self, caller_id: int, expense_id: int, operation: str) -> Expense:
        expense = await self._expenses.find_by_id(expense_id)
        if expense is None:
            raise NotFound("Expense not found")

        if expense.user_id != caller_id:
            if self._audit_logger:
                await self._audit_logger.log_access_denied(expense_id, caller_id, operation)
            raise Forbidden("Unauthorized access to expense")

        return expense

    async def get(self, caller_id: int, expense_id: int) -> Expense:
        """
        Fetch one of the caller's expenses.

        Raises:
            NotFound: No expense with this id
            Forbidden: The expense belongs to another user
        """
        caller_id = _require_caller(caller_id)
        return await self._get_owned(caller_id, expense_id, "read")

    async def list_owned(self, caller_id: int) -> list[Expense]:
        """Every expense owned by the caller, in storage order. May be empty."""
        caller_id = _require_caller(caller_id)
        return [
            expense
            for expense in await self._expenses.find_all()
            if expense.user_id == caller_id
        ]

    async def list_mine(self, caller_id: int) -> list[Expense]:
        """
        Every expense owned by the caller.

        Raises:
            NotFound: The caller owns no expenses
        """
        expenses = await self.list_owned(caller_id)
        if not expenses:
            raise NotFound("No expenses found")
        return expenses

    async def update(
        self,
        caller_id: int,
        expense_id: int,
        changes: Union[ExpenseUpdate, Mapping],
    ) -> Expense:
        """
        Apply a partial update to one of the caller's expenses.

        Empty strings and an amount of 0 leave the stored value unchanged.

        Raises:
            NotFound / Forbidden: As for get()
            ValidationError: A supplied field is malformed
        """
        caller_id = _require_caller(caller_id)
        expense = await self._get_owned(caller_id, expense_id, "update")

        if not isinstance(changes, ExpenseUpdate):
            if not isinstance(changes, Mapping):
                raise ValidationError("Request body must be a JSON object")
            try:
                changes = ExpenseUpdate.model_validate(dict(changes))
            except PydanticValidationError as e:
                raise ValidationError(issues=issues_from_pydantic(e))

        raise_for_issues(self._validator.validate_update(changes))

        supplied = changes.supplied_fields()
        if "category" in supplied:
            supplied["category"] = ExpenseCategory(supplied["category"])

        # The merged record must satisfy the same limits as a new one
        try:
            merged = Expense.model_validate({**expense.model_dump(), **supplied})
        except PydanticValidationError as e:
            raise ValidationError(issues=issues_from_pydantic(e))

        saved = await self._expenses.save(merged)

        if self._audit_logger:
            await self._audit_logger.log_expense_updated(
                expense_id, caller_id, sorted(supplied)
            )
        return saved

    async def delete(self, caller_id: int, expense_id: int) -> None:
        """
        Delete one of the caller's expenses.

        Raises:
            NotFound / Forbidden: As for get()
            StorageError: The store reported nothing removed
        """
        caller_id = _require_caller(caller_id)
        await self._get_owned(caller_id, expense_id, "delete")

        deleted = await self._expenses.delete(expense_id)
        if deleted is None:
            raise StorageError("Failed to delete expense")

        if self._audit_logger:
            await self._audit_logger.log_expense_deleted(expense_id, caller_id)
