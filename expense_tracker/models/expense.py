"""
Expense ledger models.

Dates travel as DD/MM/YYYY text everywhere outside the core (request
bodies, query parameters, stored rows). They are parsed only where a
calendar comparison is needed, so a stored row with an unreadable date
can still be listed, fetched and deleted by its owner.
"""

from datetime import date as _date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from expense_tracker.models.base import RecordMetadata


DATE_FORMAT = "%d/%m/%Y"
DATE_FORMAT_LABEL = "DD/MM/YYYY"


class ExpenseCategory(str, Enum):
    """The closed set of expense categories."""
    GROCERIES = "Groceries"
    LEISURE = "Leisure"
    ELECTRONICS = "Electronics"
    UTILITIES = "Utilities"
    CLOTHING = "Clothing"
    HEALTH = "Health"
    OTHERS = "Others"

    @classmethod
    def values(cls) -> list[str]:
        return [category.value for category in cls]


def parse_expense_date(value: str) -> _date:
    """Parse a DD/MM/YYYY string. Raises ValueError on anything else."""
    return datetime.strptime(value.strip(), DATE_FORMAT).date()


class Expense(BaseModel):
    """
    A single ledger entry.

    CRITICAL: `user_id` is set once from the caller's resolved identity
    when the expense is created. Nothing downstream may change it.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    meta: RecordMetadata = Field(default_factory=RecordMetadata)

    title: str = Field(
        ...,
        min_length=1,
        max_length=200,
        description="Short title"
    )
    description: str = Field(
        ...,
        min_length=1,
        max_length=1000,
        description="Free-text description"
    )
    amount: Decimal = Field(
        ...,
        description="Amount spent"
    )
    date: str = Field(
        ...,
        description="Calendar date in DD/MM/YYYY"
    )
    category: ExpenseCategory = Field(
        ...,
        description="Expense category"
    )
    user_id: int = Field(
        ...,
        gt=0,
        description="Id of the owning user"
    )

    @property
    def id(self) -> Optional[int]:
        return self.meta.id

    def parsed_date(self) -> _date:
        return parse_expense_date(self.date)

    def to_public_dict(self) -> dict:
        return {
            "id": self.meta.id,
            "title": self.title,
            "description": self.description,
            "amount": float(self.amount),
            "date": self.date,
            "category": self.category.value,
            "userId": self.user_id,
            "createdAt": self.meta.created_at.isoformat(),
            "updatedAt": self.meta.updated_at.isoformat(),
        }


class ExpenseUpdate(BaseModel):
    """
    Partial update payload.

    An empty string or an amount of exactly 0 means "not supplied", the
    same as leaving the key out. Keys outside these five (an owner id
    among them) are ignored.
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[Decimal] = None
    date: Optional[str] = None
    category: Optional[str] = None

    def supplied_fields(self) -> dict[str, Any]:
        """Fields that should overwrite the stored record."""
        supplied = {}
        for name in ("title", "description", "date", "category"):
            value = getattr(self, name)
            if value:
                supplied[name] = value
        if self.amount is not None and self.amount != 0:
            supplied["amount"] = self.amount
        return supplied
