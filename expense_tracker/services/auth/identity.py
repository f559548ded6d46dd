"""Resolves the caller of a request from its Authorization header."""

from typing import Optional

from expense_tracker.exceptions import MalformedHeader, MissingToken, Unauthorized
from expense_tracker.models import CallerIdentity
from expense_tracker.services.auth.token_service import TokenService
from expense_tracker.services.storage import UserStorageInterface


BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> str:
    """
    Pull the token out of an ``Authorization: Bearer <token>`` header.

    Raises:
        MissingToken: Header absent, or nothing after the prefix
        MalformedHeader: Anything that isn't the literal Bearer form
    """
    if not authorization:
        raise MissingToken("authorization header is missing")
    if not authorization.startswith(BEARER_PREFIX):
        raise MalformedHeader("invalid authorization header format")
    token = authorization[len(BEARER_PREFIX):]
    if not token:
        raise MissingToken("token is empty")
    return token


class IdentityResolver:
    """
    Header -> token -> verified claims -> existing user.

    Runs before any expense storage access. A valid token for an account
    that has since been deleted does not resolve.
    """

    def __init__(self, tokens: TokenService, users: UserStorageInterface):
        self._tokens = tokens
        self._users = users

    async def resolve(self, authorization: Optional[str]) -> CallerIdentity:
        identity = self._tokens.verify(extract_bearer_token(authorization))
        if await self._users.find_by_id(identity.user_id) is None:
            raise Unauthorized("Unauthorized")
        return identity
