"""
Abstract Storage Interface

The core talks to persistence only through these two interfaces:
- UserStorageInterface (the credential store)
- ExpenseStorageInterface (the expense record store)

Implementations exist for in-memory storage (tests, local development)
and Google Sheets. Lookups return the first match or None; they never
raise for a missing record. Backend failures surface as StorageError
and are never retried by the core.
"""

from abc import ABC, abstractmethod
from typing import Optional

from expense_tracker.exceptions import ExpenseTrackerError
from expense_tracker.models import Expense, User


class UserStorageInterface(ABC):
    """
    Abstract interface for user account storage.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """
        Find the first user whose email matches exactly.

        Args:
            email: Email as typed by the user (case-sensitive)

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[User]:
        """
        Retrieve a user by id.

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def insert(self, user: User) -> User:
        """
        Persist a new user.

        Args:
            user: User without an id

        Returns:
            The stored user, with its assigned id

        Raises:
            DuplicateEmail: Another user already has this email (checked
                under the store's write lock)
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def delete(self, user_id: int) -> Optional[User]:
        """
        Delete a user by id.

        Returns:
            The removed user, or None if nothing was removed
        """
        pass


class ExpenseStorageInterface(ABC):
    """
    Abstract interface for expense record storage.

    The store does not know about ownership; the ledger service enforces it.
    """

    @abstractmethod
    async def insert(self, expense: Expense) -> Expense:
        """
        Persist a new expense.

        Returns:
            The stored expense, with its assigned id

        Raises:
            StorageError: If the insert fails
        """
        pass

    @abstractmethod
    async def find_all(self) -> list[Expense]:
        """Return every stored expense in storage order."""
        pass

    @abstractmethod
    async def find_by_id(self, expense_id: int) -> Optional[Expense]:
        """
        Retrieve an expense by id.

        Returns:
            The expense if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, expense: Expense) -> Expense:
        """
        Overwrite a stored expense with the given field values.

        `created_at` and `user_id` of the stored row are kept;
        `updated_at` is refreshed.

        Returns:
            The saved expense

        Raises:
            StorageError: If the expense no longer exists or the write fails
        """
        pass

    @abstractmethod
    async def delete(self, expense_id: int) -> Optional[Expense]:
        """
        Delete an expense by id.

        Returns:
            The removed expense, or None if nothing was removed
        """
        pass


class StorageError(ExpenseTrackerError):
    """Base exception for storage operations."""

    status_code = 500
    default_message = "Storage operation failed"


class StorageConnectionError(StorageError):
    """Could not connect to storage backend."""

    default_message = "Could not connect to storage"
