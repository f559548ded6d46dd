"""Services package."""

from expense_tracker.services.auth import (
    CredentialService,
    IdentityResolver,
    PasswordHasher,
    TokenService,
)
from expense_tracker.services.ledger import LedgerService
from expense_tracker.services.storage import (
    ExpenseStorageInterface,
    GoogleSheetsClient,
    GoogleSheetsExpenseStorage,
    GoogleSheetsUserStorage,
    InMemoryExpenseStorage,
    InMemoryUserStorage,
    StorageConnectionError,
    StorageError,
    UserStorageInterface,
)

__all__ = [
    # Auth services
    "CredentialService",
    "IdentityResolver",
    "PasswordHasher",
    "TokenService",
    # Ledger
    "LedgerService",
    # Storage services
    "ExpenseStorageInterface",
    "GoogleSheetsClient",
    "GoogleSheetsExpenseStorage",
    "GoogleSheetsUserStorage",
    "InMemoryExpenseStorage",
    "InMemoryUserStorage",
    "StorageConnectionError",
    "StorageError",
    "UserStorageInterface",
]
