"""
Credential Service

Registers users, checks passwords and issues tokens on login. Also owns
the account operations behind /users/me.

CRITICAL: The plaintext password exists only for the duration of a
register() or login() call. It is never stored, logged or returned.
"""

from typing import Any, Optional

from pydantic import ValidationError as PydanticValidationError

from expense_tracker.audit import AuditLogger
from expense_tracker.exceptions import (
    AccountNotFound,
    DuplicateEmail,
    InvalidCredentials,
    NotFound,
    ValidationError,
)
from expense_tracker.models import User
from expense_tracker.services.auth.passwords import PasswordHasher
from expense_tracker.services.auth.token_service import TokenService
from expense_tracker.services.storage import StorageError, UserStorageInterface
from expense_tracker.validation import (
    CredentialValidator,
    issues_from_pydantic,
    raise_for_issues,
)


class CredentialService:

    def __init__(
        self,
        users: UserStorageInterface,
        tokens: TokenService,
        hasher: Optional[PasswordHasher] = None,
        validator: Optional[CredentialValidator] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._users = users
        self._tokens = tokens
        self._hasher = hasher or PasswordHasher()
        self._validator = validator or CredentialValidator()
        self._audit_logger = audit_logger

    async def register(
        self,
        first_name: Any,
        last_name: Any,
        email: Any,
        password: Any,
    ) -> User:
        """
        Register a new user.

        Raises:
            ValidationError: Any field missing or empty
            DuplicateEmail: Email already belongs to a user
        """
        raise_for_issues(
            self._validator.validate_registration(first_name, last_name, email, password)
        )
        email = email.strip()

        if await self._users.find_by_email(email) is not None:
            raise DuplicateEmail("User with this email already exists")

        try:
            new_user = User(
                first_name=first_name,
                last_name=last_name,
                email=email,
                password_hash=self._hasher.hash(password),
            )
        except PydanticValidationError as e:
            raise ValidationError(issues=issues_from_pydantic(e))

        user = await self._users.insert(new_user)

        if self._audit_logger:
            await self._audit_logger.log_user_registered(user.id)
        return user

    async def login(self, email: Any, password: Any) -> str:
        """
        Check credentials and issue a bearer token.

        Raises:
            ValidationError: Email or password missing
            AccountNotFound: No user with this email
            InvalidCredentials: Password does not match
        """
        raise_for_issues(
            self._validator.validate_login(email, password),
            message="Email and password are required",
        )

        user = await self._users.find_by_email(email.strip())
        if user is None:
            if self._audit_logger:
                await self._audit_logger.log_login_failed("unknown_account")
            raise AccountNotFound()

        if not self._hasher.verify(password, user.password_hash):
            if self._audit_logger:
                await self._audit_logger.log_login_failed("bad_password", user.id)
            raise InvalidCredentials()

        token = self._tokens.issue(user.id, user.email)
        if self._audit_logger:
            await self._audit_logger.log_login_succeeded(user.id)
        return token

    async def get_account(self, caller_id: int) -> User:
        user = await self._users.find_by_id(caller_id)
        if user is None:
            raise NotFound("User not found")
        return user

    async def delete_account(self, caller_id: int) -> None:
        """
        Delete the caller's account.

        Expenses owned by the account are left in place.
        """
        await self.get_account(caller_id)

        deleted = await self._users.delete(caller_id)
        if deleted is None:
            raise StorageError("Failed to delete user")

        if self._audit_logger:
            await self._audit_logger.log_account_deleted(caller_id)
