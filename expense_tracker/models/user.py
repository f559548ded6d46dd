"""User account model."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from expense_tracker.models.base import RecordMetadata


class User(BaseModel):
    """
    A registered account.

    CRITICAL: `password_hash` is opaque and never leaves the core.
    Use to_public_dict() for anything user-visible.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    meta: RecordMetadata = Field(default_factory=RecordMetadata)

    first_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="First name"
    )
    last_name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Last name"
    )
    email: str = Field(
        ...,
        min_length=1,
        max_length=254,
        description="Login email, unique across users (case-sensitive)"
    )
    password_hash: str = Field(
        ...,
        repr=False,
        description="Salted scrypt hash in werkzeug's method$salt$hash format"
    )

    @property
    def id(self) -> Optional[int]:
        return self.meta.id

    def to_public_dict(self) -> dict:
        return {
            "id": self.meta.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "createdAt": self.meta.created_at.isoformat(),
            "updatedAt": self.meta.updated_at.isoformat(),
        }
