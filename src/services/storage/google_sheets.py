"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as a remote backend because:
1. Non-technical users can look at their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- No transactions (the ledger rewrites a whole key at a time)
- A cell holds at most 50,000 characters, so long values are split
  across consecutive cells of the same row

Layout of the store worksheet: one row per key.
Column A holds the key, columns B onward hold the value in chunks.
"""

from typing import Optional

import gspread
from google.oauth2.service_account import Credentials
from tenacity import retry, stop_after_attempt, wait_exponential

from src.config import GoogleSheetsSettings, get_settings
from src.services.storage.interface import (
    ConnectionError,
    KeyValueStore,
    StorageError,
)


STORE_HEADER = ["key", "value"]

# Google Sheets hard limit is 50,000 characters per cell
CELL_CHUNK_SIZE = 45000


def split_value(value: str, chunk_size: int = CELL_CHUNK_SIZE) -> list[str]:
    """Split a value into cell-sized chunks (at least one, possibly empty)."""
    if not value:
        return [""]
    return [value[i:i + chunk_size] for i in range(0, len(value), chunk_size)]


class GoogleSheetsClient:
    """
    Low-level Google Sheets client wrapper.

    Handles authentication and provides retry logic for API calls.
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

        Uses service account credentials for authentication.
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
                raise ConnectionError(
                    f"Google credentials file not found: {self._settings.credentials_path}"
                )
            except Exception as e:
                raise ConnectionError(f"Failed to connect to Google Sheets: {e}")

        return self._client

    def get_spreadsheet(self) -> gspread.Spreadsheet:
        """Get the configured spreadsheet."""
        if self._spreadsheet is None:
            client = self.connect()
            try:
                self._spreadsheet = client.open_by_key(
                    self._settings.spreadsheet_id
                )
            except gspread.SpreadsheetNotFound:
                raise ConnectionError(
                    f"Spreadsheet not found: {self._settings.spreadsheet_id}"
                )
        return self._spreadsheet

    def get_store_sheet(self) -> gspread.Worksheet:
        """Get or create the key/value worksheet."""
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(self._settings.store_sheet_name)
        except gspread.WorksheetNotFound:
            sheet = spreadsheet.add_worksheet(
                title=self._settings.store_sheet_name,
                rows=100,
                cols=len(STORE_HEADER),
            )
            sheet.append_row(STORE_HEADER)
        return sheet


class GoogleSheetsKeyValueStore(KeyValueStore):
    """
    Google Sheets implementation of the key-value store.

    Every call re-reads the sheet; values are small and the user
    may edit the sheet by hand between calls.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def _find_row(all_rows: list[list[str]], key: str) -> Optional[int]:
        """1-based sheet row index of `key`, skipping the header."""
        for idx, row in enumerate(all_rows[1:], start=2):
            if row and row[0] == key:
                return idx
        return None

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def get(self, key: str) -> Optional[str]:
        """Read a value, joining its chunks back together."""
        try:
            sheet = self._client.get_store_sheet()
            all_rows = sheet.get_all_values()
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read key {key!r}: {e}")

        idx = self._find_row(all_rows, key)
        if idx is None:
            return None
        return "".join(all_rows[idx - 1][1:])

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        reraise=True,
    )
    def set(self, key: str, value: str) -> None:
        """Write a value, replacing the key's row or appending a new one."""
        chunks = split_value(value)
        try:
            sheet = self._client.get_store_sheet()
            all_rows = sheet.get_all_values()
            idx = self._find_row(all_rows, key)

            if idx is None:
                sheet.append_row([key, *chunks], value_input_option="RAW")
                return

            # Blank out leftover chunks from a longer previous value
            previous_width = len(all_rows[idx - 1])
            row = [key, *chunks]
            row += [""] * (previous_width - len(row))

            if len(row) > sheet.col_count:
                sheet.add_cols(len(row) - sheet.col_count)

            sheet.update(
                values=[row],
                range_name=f"A{idx}",
                value_input_option="RAW",
            )
        except StorageError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to write key {key!r}: {e}")
