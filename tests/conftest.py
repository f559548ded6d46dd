"""Shared fixtures. Everything runs in process: no network, no real sheets."""

from datetime import datetime, timedelta, timezone

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.config import AuthSettings, Settings
from expense_tracker.orchestrator import AppComponents
from expense_tracker.queries import ExpenseQueryEngine
from expense_tracker.services.auth import (
    CredentialService,
    IdentityResolver,
    PasswordHasher,
    TokenService,
)
from expense_tracker.services.ledger import LedgerService
from expense_tracker.services.storage import InMemoryExpenseStorage, InMemoryUserStorage


FIXED_NOW = datetime(2024, 6, 15, 12, 0, tzinfo=timezone.utc)

# Low scrypt cost keeps the suite fast; production uses werkzeug's default.
TEST_HASH_METHOD = "scrypt:1024:8:1"


class FakeClock:
    """A clock that stands still until a test moves it."""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def auth_settings():
    return AuthSettings(
        secret_key="test-secret-key",
        issuer="expense-tracker",
        algorithm="HS256",
        expiry_minutes=60,
        password_hash_method=TEST_HASH_METHOD,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def user_storage():
    return InMemoryUserStorage()


@pytest.fixture
def expense_storage():
    return InMemoryExpenseStorage()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def token_service(auth_settings, clock):
    return TokenService(auth_settings, clock=clock)


@pytest.fixture
def hasher():
    return PasswordHasher(method=TEST_HASH_METHOD)


@pytest.fixture
def credential_service(user_storage, token_service, hasher, audit_logger):
    return CredentialService(
        user_storage,
        token_service,
        hasher=hasher,
        audit_logger=audit_logger,
    )


@pytest.fixture
def identity_resolver(token_service, user_storage):
    return IdentityResolver(token_service, user_storage)


@pytest.fixture
def ledger(expense_storage, audit_logger):
    return LedgerService(expense_storage, audit_logger=audit_logger)


@pytest.fixture
def query_engine(ledger, audit_logger, clock):
    return ExpenseQueryEngine(ledger, audit_logger=audit_logger, clock=clock)


@pytest.fixture
def components(
    token_service,
    credential_service,
    identity_resolver,
    ledger,
    query_engine,
    audit_logger,
):
    return AppComponents(
        settings=Settings(),
        token_service=token_service,
        credential_service=credential_service,
        identity_resolver=identity_resolver,
        ledger=ledger,
        queries=query_engine,
        audit_logger=audit_logger,
    )
