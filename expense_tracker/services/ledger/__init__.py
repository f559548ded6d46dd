"""Expense ledger package."""

from expense_tracker.services.ledger.ledger_service import LedgerService

__all__ = ["LedgerService"]
