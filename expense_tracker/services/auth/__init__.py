"""Authentication services package."""

from expense_tracker.services.auth.token_service import Clock, TokenService, utc_clock
from expense_tracker.services.auth.passwords import PasswordHasher
from expense_tracker.services.auth.credentials import CredentialService
from expense_tracker.services.auth.identity import (
    BEARER_PREFIX,
    IdentityResolver,
    extract_bearer_token,
)

__all__ = [
    "BEARER_PREFIX",
    "Clock",
    "CredentialService",
    "IdentityResolver",
    "PasswordHasher",
    "TokenService",
    "extract_bearer_token",
    "utc_clock",
]
