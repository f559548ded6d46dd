"""
Record metadata shared by every persisted record.

User and Expense embed a RecordMetadata value as their `meta` field
instead of inheriting id and timestamps from a common base class.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class RecordMetadata(BaseModel):
    """
    Identity and timestamps of a stored record.

    `id` stays None until the store assigns it on insert and never
    changes afterwards. The value is frozen: stores produce a new
    RecordMetadata when they assign an id or touch `updated_at`.
    """
    model_config = ConfigDict(frozen=True)

    id: Optional[int] = Field(
        default=None,
        gt=0,
        description="Store-assigned numeric id"
    )
    created_at: datetime = Field(
        default_factory=utc_now,
        description="When the record was first stored"
    )
    updated_at: datetime = Field(
        default_factory=utc_now,
        description="Last time the record was saved"
    )

    def with_id(self, record_id: int) -> "RecordMetadata":
        return self.model_copy(update={"id": record_id})

    def touched(self) -> "RecordMetadata":
        return self.model_copy(update={"updated_at": utc_now()})
