"""
Composition root for the Expense Tracker.

Builds every service once at startup and hands each one the storage
handle it needs. Nothing here is request-scoped: the signing secret and
the storage handle are created once and only read afterwards.
"""

from dataclasses import dataclass
from typing import Optional

import structlog

from expense_tracker.audit import AuditLogger
from expense_tracker.config import Settings, get_settings
from expense_tracker.queries import ExpenseQueryEngine
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
    UserStorageInterface,
)


logger = structlog.get_logger(__name__)


@dataclass
class AppComponents:
    settings: Settings
    token_service: TokenService
    credential_service: CredentialService
    identity_resolver: IdentityResolver
    ledger: LedgerService
    queries: ExpenseQueryEngine
    audit_logger: AuditLogger
    sheets_client: Optional[GoogleSheetsClient] = None

    def close(self) -> None:
        """Release the storage handle, if there is one."""
        if self.sheets_client is not None:
            self.sheets_client.close()
            self.sheets_client = None


def _build_storage(
    settings: Settings,
) -> tuple[UserStorageInterface, ExpenseStorageInterface, Optional[GoogleSheetsClient]]:
    backend = settings.storage.backend

    if backend == "google_sheets":
        sheets_client = GoogleSheetsClient(settings.google_sheets).open()
        return (
            GoogleSheetsUserStorage(sheets_client),
            GoogleSheetsExpenseStorage(sheets_client),
            sheets_client,
        )

    return InMemoryUserStorage(), InMemoryExpenseStorage(), None


def create_app_components(settings: Optional[Settings] = None) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to build from. Defaults to get_settings().

    Raises:
        StorageConnectionError: The Google Sheets backend is selected but
            cannot be reached
    """
    settings = settings or get_settings()
    auth_settings = settings.auth

    users, expenses, sheets_client = _build_storage(settings)
    audit_logger = AuditLogger()

    token_service = TokenService(auth_settings)
    hasher = PasswordHasher(method=auth_settings.password_hash_method)

    credential_service = CredentialService(
        users,
        token_service,
        hasher=hasher,
        audit_logger=audit_logger,
    )
    identity_resolver = IdentityResolver(token_service, users)

    ledger = LedgerService(expenses, audit_logger=audit_logger)
    queries = ExpenseQueryEngine(ledger, audit_logger=audit_logger)

    logger.info("components_created", storage_backend=settings.storage.backend)

    return AppComponents(
        settings=settings,
        token_service=token_service,
        credential_service=credential_service,
        identity_resolver=identity_resolver,
        ledger=ledger,
        queries=queries,
        audit_logger=audit_logger,
        sheets_client=sheets_client,
    )
