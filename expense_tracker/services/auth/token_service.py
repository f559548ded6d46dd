"""
Identity Token Service

Issues and verifies signed, time-limited bearer tokens (JWT, HMAC family)
binding a user id and email to a request.

There is no revocation and no refresh: a token is valid until its `exp`
claim passes, after which the caller must log in again.

The clock is injectable so expiry can be checked against a fixed time.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from expense_tracker.config import HMAC_ALGORITHMS, AuthSettings, get_settings
from expense_tracker.exceptions import (
    InvalidToken,
    MissingToken,
    SigningError,
    TokenExpired,
)
from expense_tracker.models import CallerIdentity, TokenClaims


Clock = Callable[[], datetime]


def utc_clock() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Signs and checks bearer tokens with the process-wide secret.

    Only HS256/HS384/HS512 tokens are accepted; a token whose header
    names any other algorithm is rejected before its signature is looked at.
    """

    def __init__(
        self,
        settings: Optional[AuthSettings] = None,
        clock: Optional[Clock] = None,
    ):
        self._settings = settings or get_settings().auth
        self._clock = clock or utc_clock

    @property
    def expiry(self) -> timedelta:
        return timedelta(minutes=self._settings.expiry_minutes)

    def _signing_key(self) -> str:
        if not self._settings.secret_key:
            raise SigningError("JWT secret key is not configured")
        return self._settings.secret_key

    def issue(self, user_id: int, email: str) -> str:
        """
        Issue a token for a user, expiring one token lifetime from now.

        Raises:
            SigningError: If the secret is unavailable or signing fails
        """
        key = self._signing_key()
        issued_at = self._clock()
        claims = TokenClaims(
            iss=self._settings.issuer,
            sub=user_id,
            email=email,
            exp=int((issued_at + self.expiry).timestamp()),
        )
        try:
            return jwt.encode(
                claims.to_jwt_payload(),
                key,
                algorithm=self._settings.algorithm,
            )
        except JWTError as e:
            raise SigningError(f"Failed to sign token: {e}")

    def decode(self, token: Optional[str]) -> TokenClaims:
        """
        Validate a token and return its typed claims.

        Raises:
            MissingToken: No token supplied
            InvalidToken: Bad format, signature, algorithm, issuer or claims
            TokenExpired: The expiry has passed
            SigningError: The secret is unavailable
        """
        if not token:
            raise MissingToken("token is empty")

        key = self._signing_key()

        try:
            header = jwt.get_unverified_header(token)
        except JWTError:
            raise InvalidToken("malformed token")
        if header.get("alg") not in HMAC_ALGORITHMS:
            raise InvalidToken("unexpected signing method")

        try:
            payload = jwt.decode(
                token,
                key,
                algorithms=list(HMAC_ALGORITHMS),
                issuer=self._settings.issuer,
                # Expiry is checked below against the injected clock
                options={"verify_exp": False},
            )
        except JWTError:
            raise InvalidToken("invalid token")

        try:
            claims = TokenClaims.model_validate(payload)
        except PydanticValidationError:
            raise InvalidToken("invalid token claims")

        if self._clock().timestamp() > claims.exp:
            raise TokenExpired("token has expired")

        return claims

    def verify(self, token: Optional[str]) -> CallerIdentity:
        """Validate a token and return the (user id, email) it binds."""
        claims = self.decode(token)
        return CallerIdentity(user_id=claims.sub, email=claims.email)
