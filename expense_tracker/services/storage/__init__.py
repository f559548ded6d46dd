"""
Storage Services Package

Provides abstract interfaces and concrete implementations for data storage.
Implements in-memory and Google Sheets backends behind the same interfaces.
"""

from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    StorageConnectionError,
    StorageError,
    UserStorageInterface,
)
from expense_tracker.services.storage.memory import (
    InMemoryExpenseStorage,
    InMemoryUserStorage,
)
from expense_tracker.services.storage.google_sheets import (
    EXPENSE_COLUMNS,
    USER_COLUMNS,
    GoogleSheetsClient,
    GoogleSheetsExpenseStorage,
    GoogleSheetsUserStorage,
)

__all__ = [
    # Interfaces
    "ExpenseStorageInterface",
    "UserStorageInterface",
    # Exceptions
    "StorageConnectionError",
    "StorageError",
    # In-memory implementation
    "InMemoryExpenseStorage",
    "InMemoryUserStorage",
    # Google Sheets implementation
    "EXPENSE_COLUMNS",
    "USER_COLUMNS",
    "GoogleSheetsClient",
    "GoogleSheetsExpenseStorage",
    "GoogleSheetsUserStorage",
]
