"""
Expense Tracker - Source Package

A personal finance tracker: users register, authenticate with bearer
tokens, and manage a private ledger of dated, categorized expenses.

DESIGN PRINCIPLES:
1. Every expense has exactly one owner
2. Identity is resolved before storage is touched
3. Fail early, fail visibly
4. Storage layer is swappable
5. Every mutation is auditable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
