"""Typed bearer token claims and the identity they resolve to."""

from pydantic import BaseModel, ConfigDict, Field


class TokenClaims(BaseModel):
    """
    Claims carried by a bearer token.

    Decoded and validated once, at verification time. `sub` is encoded
    as a decimal string on the wire and parsed back to the numeric user id.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    iss: str = Field(..., min_length=1)
    sub: int = Field(..., gt=0)
    email: str = Field(..., min_length=1)
    exp: int = Field(..., gt=0, description="Expiry as unix seconds")

    def to_jwt_payload(self) -> dict:
        return {
            "iss": self.iss,
            "sub": str(self.sub),
            "email": self.email,
            "exp": self.exp,
        }


class CallerIdentity(BaseModel):
    """The user a request acts on behalf of."""
    model_config = ConfigDict(frozen=True)

    user_id: int = Field(..., gt=0)
    email: str
