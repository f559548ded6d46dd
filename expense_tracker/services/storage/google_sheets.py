"""
Google Sheets Storage Implementation

Users and expenses are stored as rows in two worksheets of one
spreadsheet, one record per row, with a header row created on first use.

TRADEOFFS:
- Not suitable for high-volume data (fine for a personal ledger)
- No transactions; ids are assigned as max(id) + 1 under a process-local
  lock, so only one server process may write to a spreadsheet
- Deletes are soft: the row gets a deleted_at timestamp and stays in the
  sheet, so its id is never reused
- Lookups and uniqueness checks are linear scans

Rows that fail to parse (e.g. a date or category edited by hand into
something unreadable) are skipped on scans and logged.
"""

import threading
from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional, TypeVar

import gspread
import structlog
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from expense_tracker.config import GoogleSheetsSettings, get_settings
from expense_tracker.exceptions import DuplicateEmail, ExpenseTrackerError
from expense_tracker.models import (
    Expense,
    ExpenseCategory,
    RecordMetadata,
    User,
    utc_now,
)
from expense_tracker.services.storage.interface import (
    ExpenseStorageInterface,
    StorageConnectionError,
    StorageError,
    UserStorageInterface,
)


logger = structlog.get_logger(__name__)

T = TypeVar("T")


# Column mappings for Users sheet
USER_COLUMNS = [
    "id",
    "created_at",
    "updated_at",
    "first_name",
    "last_name",
    "email",
    "password_hash",
    "deleted_at",
]

# Column mappings for Expenses sheet
EXPENSE_COLUMNS = [
    "id",
    "created_at",
    "updated_at",
    "title",
    "description",
    "amount",
    "date",
    "category",
    "user_id",
    "deleted_at",
]

USER_DELETED_AT = USER_COLUMNS.index("deleted_at")
EXPENSE_DELETED_AT = EXPENSE_COLUMNS.index("deleted_at")


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    This is the process-wide storage handle: the composition root opens it
    once at startup and closes it at shutdown.
    """

    def __init__(self, settings: Optional[GoogleSheetsSettings] = None):
        self._client: Optional[gspread.Client] = None
        self._spreadsheet: Optional[gspread.Spreadsheet] = None
        self._settings = settings or get_settings().google_sheets

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def connect(self) -> gspread.Client:
        """
        Establish connection to Google Sheets.

        Uses service account credentials for authentication. Only this
        startup step is retried; row operations fail immediately.
        """
        if self._client is None:
            try:
                scopes = [
                    "https://www.googleapis.com/auth/spreadsheets",
                    "https://www.googleapis.com/auth/drive",
                ]
                credentials = Credentials.from_service_account_file(
                    self._settings.credentials_path,
                    scopes=scopes,
                )
                self._client = gspread.authorize(credentials)
            except FileNotFoundError:
                raise StorageConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise StorageConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def open(self) -> "GoogleSheetsClient":
        """Connect and make sure both worksheets exist."""
        self.get_users_sheet()
        self.get_expenses_sheet()
        logger.info("sheets_storage_opened", spreadsheet_id=self._settings.spreadsheet_id)
        return self

    def close(self) -> None:
        """Drop the authorized client; the next call reconnects."""
        self._spreadsheet = None
        self._client = None
        logger.info("sheets_storage_closed")

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise StorageConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def _get_or_create_sheet(self, title: str, columns: list[str]) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=1000,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_users_sheet(self) -> gspread.Worksheet:
        """Get or create the Users worksheet."""
        return self._get_or_create_sheet(self._settings.users_sheet_name, USER_COLUMNS)

    def get_expenses_sheet(self) -> gspread.Worksheet:
        """Get or create the Expenses worksheet."""
        return self._get_or_create_sheet(self._settings.expenses_sheet_name, EXPENSE_COLUMNS)


def _safe_get(row: list, index: int, default: str = "") -> str:
    try:
        return row[index] if row[index] else default
    except IndexError:
        return default


def _all_rows(sheet: gspread.Worksheet) -> list[tuple[int, list]]:
    """Every data row ever written, deleted ones included, with 1-based row numbers."""
    all_rows = sheet.get_all_values()
    return [
        (idx, row)
        for idx, row in enumerate(all_rows[1:], start=2)  # Row 1 is header
        if row and row[0]
    ]


def _live_rows(rows: list[tuple[int, list]], deleted_index: int) -> list[tuple[int, list]]:
    return [(idx, row) for idx, row in rows if not _safe_get(row, deleted_index)]


def _next_id(rows: list[tuple[int, list]]) -> int:
    # Deleted rows still count, so an id is never handed out twice
    ids = [int(row[0]) for _, row in rows if row[0].isdigit()]
    return max(ids, default=0) + 1


def _parse_rows(
    rows: list[tuple[int, list]],
    parse: Callable[[list], T],
    kind: str,
) -> list[tuple[int, T]]:
    parsed = []
    for idx, row in rows:
        try:
            parsed.append((idx, parse(row)))
        except Exception as e:
            logger.warning("sheets_row_skipped", kind=kind, row=idx, error=str(e))
    return parsed


def _mark_deleted(sheet: gspread.Worksheet, idx: int, deleted_index: int) -> None:
    sheet.update_cell(idx, deleted_index + 1, utc_now().isoformat())


class GoogleSheetsUserStorage(UserStorageInterface):
    """
    Google Sheets implementation of the credential store.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()
        self._lock = threading.Lock()

    def _user_to_row(self, user: User) -> list:
        return [
            str(user.id),
            user.meta.created_at.isoformat(),
            user.meta.updated_at.isoformat(),
            user.first_name,
            user.last_name,
            user.email,
            user.password_hash,
            "",
        ]

    def _row_to_user(self, row: list) -> User:
        return User(
            meta=RecordMetadata(
                id=int(_safe_get(row, 0)),
                created_at=datetime.fromisoformat(_safe_get(row, 1)),
                updated_at=datetime.fromisoformat(_safe_get(row, 2)),
            ),
            first_name=_safe_get(row, 3),
            last_name=_safe_get(row, 4),
            email=_safe_get(row, 5),
            password_hash=_safe_get(row, 6),
        )

    def _users(self, rows: list[tuple[int, list]]) -> list[tuple[int, User]]:
        return _parse_rows(_live_rows(rows, USER_DELETED_AT), self._row_to_user, "user")

    def _all_users(self) -> list[tuple[int, User]]:
        return self._users(_all_rows(self._client.get_users_sheet()))

    async def find_by_email(self, email: str) -> Optional[User]:
        try:
            for _, user in self._all_users():
                if user.email == email:
                    return user
            return None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to look up user by email: {e}")

    async def find_by_id(self, user_id: int) -> Optional[User]:
        try:
            for _, user in self._all_users():
                if user.id == user_id:
                    return user
            return None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get user: {e}")

    async def insert(self, user: User) -> User:
        try:
            with self._lock:
                sheet = self._client.get_users_sheet()
                rows = _all_rows(sheet)
                if any(existing.email == user.email for _, existing in self._users(rows)):
                    raise DuplicateEmail("User with this email already exists")
                stored = user.model_copy(
                    update={"meta": user.meta.with_id(_next_id(rows))}
                )
                sheet.append_row(self._user_to_row(stored), value_input_option="RAW")
            return stored
        except ExpenseTrackerError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save user: {e}")

    async def delete(self, user_id: int) -> Optional[User]:
        try:
            with self._lock:
                sheet = self._client.get_users_sheet()
                for idx, user in self._users(_all_rows(sheet)):
                    if user.id == user_id:
                        _mark_deleted(sheet, idx, USER_DELETED_AT)
                        return user
            return None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete user: {e}")


class GoogleSheetsExpenseStorage(ExpenseStorageInterface):
    """
    Google Sheets implementation of the expense record store.

    Amounts are stored as decimal strings and dates as DD/MM/YYYY text,
    both written RAW so Sheets does not reinterpret them.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()
        self._lock = threading.Lock()

    def _expense_to_row(self, expense: Expense) -> list:
        return [
            str(expense.id),
            expense.meta.created_at.isoformat(),
            expense.meta.updated_at.isoformat(),
            expense.title,
            expense.description,
            str(expense.amount),
            expense.date,
            expense.category.value,
            str(expense.user_id),
            "",
        ]

    def _row_to_expense(self, row: list) -> Expense:
        return Expense(
            meta=RecordMetadata(
                id=int(_safe_get(row, 0)),
                created_at=datetime.fromisoformat(_safe_get(row, 1)),
                updated_at=datetime.fromisoformat(_safe_get(row, 2)),
            ),
            title=_safe_get(row, 3),
            description=_safe_get(row, 4),
            amount=Decimal(_safe_get(row, 5)),
            date=_safe_get(row, 6),
            category=ExpenseCategory(_safe_get(row, 7)),
            user_id=int(_safe_get(row, 8)),
        )

    def _expenses(self, rows: list[tuple[int, list]]) -> list[tuple[int, Expense]]:
        return _parse_rows(
            _live_rows(rows, EXPENSE_DELETED_AT), self._row_to_expense, "expense"
        )

    def _all_expenses(self) -> list[tuple[int, Expense]]:
        return self._expenses(_all_rows(self._client.get_expenses_sheet()))

    async def insert(self, expense: Expense) -> Expense:
        try:
            with self._lock:
                sheet = self._client.get_expenses_sheet()
                stored = expense.model_copy(
                    update={"meta": expense.meta.with_id(_next_id(_all_rows(sheet)))}
                )
                sheet.append_row(self._expense_to_row(stored), value_input_option="RAW")
            return stored
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save expense: {e}")

    async def find_all(self) -> list[Expense]:
        try:
            return [expense for _, expense in self._all_expenses()]
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to list expenses: {e}")

    async def find_by_id(self, expense_id: int) -> Optional[Expense]:
        try:
            for _, expense in self._all_expenses():
                if expense.id == expense_id:
                    return expense
            return None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get expense: {e}")

    async def save(self, expense: Expense) -> Expense:
        try:
            with self._lock:
                sheet = self._client.get_expenses_sheet()
                for idx, current in self._expenses(_all_rows(sheet)):
                    if current.id != expense.id:
                        continue
                    stored = expense.model_copy(update={
                        "meta": current.meta.touched(),
                        "user_id": current.user_id,
                    })
                    # Update each cell in the row
                    for col_idx, value in enumerate(self._expense_to_row(stored), start=1):
                        sheet.update_cell(idx, col_idx, value)
                    return stored
            raise StorageError(f"Expense not found in storage: {expense.id}")
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to update expense: {e}")

    async def delete(self, expense_id: int) -> Optional[Expense]:
        try:
            with self._lock:
                sheet = self._client.get_expenses_sheet()
                for idx, expense in self._expenses(_all_rows(sheet)):
                    if expense.id == expense_id:
                        _mark_deleted(sheet, idx, EXPENSE_DELETED_AT)
                        return expense
            return None
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete expense: {e}")
