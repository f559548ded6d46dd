"""
In-Memory Storage Implementation

Keeps users and expenses in dicts keyed by id, in insertion order.
Used by the test suite and as the default backend for local runs.

Records are copied on the way in and out, so callers never hold a
reference to stored state. A thread lock guards each store because the
HTTP server may run requests on several threads.
"""

import itertools
import threading
from typing import Optional

from expense_tracker.exceptions import DuplicateEmail
from expense_tracker.models import Expense, User
from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    StorageError,
    UserStorageInterface,
)


class InMemoryUserStorage(UserStorageInterface):

    def __init__(self):
        self._users: dict[int, User] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    async def find_by_email(self, email: str) -> Optional[User]:
        with self._lock:
            for user in self._users.values():
                if user.email == email:
                    return user.model_copy(deep=True)
        return None

    async def find_by_id(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.get(user_id)
            return user.model_copy(deep=True) if user else None

    async def insert(self, user: User) -> User:
        if user.id is not None:
            raise StorageError(f"User already has an id: {user.id}")
        with self._lock:
            if any(existing.email == user.email for existing in self._users.values()):
                raise DuplicateEmail("User with this email already exists")
            stored = user.model_copy(
                update={"meta": user.meta.with_id(next(self._ids))},
                deep=True,
            )
            self._users[stored.id] = stored
            return stored.model_copy(deep=True)

    async def delete(self, user_id: int) -> Optional[User]:
        with self._lock:
            user = self._users.pop(user_id, None)
            return user.model_copy(deep=True) if user else None


class InMemoryExpenseStorage(ExpenseStorageInterface):

    def __init__(self):
        self._expenses: dict[int, Expense] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    async def insert(self, expense: Expense) -> Expense:
        if expense.id is not None:
            raise StorageError(f"Expense already has an id: {expense.id}")
        with self._lock:
            stored = expense.model_copy(
                update={"meta": expense.meta.with_id(next(self._ids))},
                deep=True,
            )
            self._expenses[stored.id] = stored
            return stored.model_copy(deep=True)

    async def find_all(self) -> list[Expense]:
        with self._lock:
            return [expense.model_copy(deep=True) for expense in self._expenses.values()]

    async def find_by_id(self, expense_id: int) -> Optional[Expense]:
        with self._lock:
            expense = self._expenses.get(expense_id)
            return expense.model_copy(deep=True) if expense else None

    async def save(self, expense: Expense) -> Expense:
        with self._lock:
            current = self._expenses.get(expense.id) if expense.id else None
            if current is None:
                raise StorageError(f"Expense not found in storage: {expense.id}")
            stored = expense.model_copy(
                update={
                    "meta": current.meta.touched(),
                    "user_id": current.user_id,
                },
                deep=True,
            )
            self._expenses[stored.id] = stored
            return stored.model_copy(deep=True)

    async def delete(self, expense_id: int) -> Optional[Expense]:
        with self._lock:
            expense = self._expenses.pop(expense_id, None)
            return expense.model_copy(deep=True) if expense else None
