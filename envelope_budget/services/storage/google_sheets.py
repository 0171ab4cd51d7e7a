"""
Google Sheets Storage Implementation

DESIGN DECISION: Google Sheets is offered as an optional backend because:
1. Non-technical users can view their data directly in Sheets
2. No database setup required
3. Built-in backup (Google's infrastructure)

TRADEOFFS:
- The whole ledger is one JSON document in one cell, so it is bounded by
  the Sheets cell limit (we refuse to write past it)
- No transactions: a save updates a single cell, which is atomic
- Limited query capabilities (we filter in Python)

Sheet layout for snapshots: one row per key -> key | value_json | updated_at
"""

import json
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

import gspread
from google.oauth2.service_account import Credentials
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from envelope_budget.config import GoogleSheetsSettings, get_settings
from envelope_budget.models.audit import AuditEvent, AuditEventType, AuditSeverity
from envelope_budget.services.storage.interface import (
    AuditStorageInterface,
    ConnectionError,
    Snapshot,
    StateStorageInterface,
    StorageError,
)


# Column mappings for the state sheet
STATE_COLUMNS = [
    "key",
    "value_json",
    "updated_at",
]

# Column mappings for Audit sheet
AUDIT_COLUMNS = [
    "event_id",
    "timestamp",
    "event_type",
    "severity",
    "entity_type",
    "entity_id",
    "correlation_id",
    "description",
    "details_json",
    "error_message",
    "is_user_action",
]

# Google Sheets rejects cells longer than this
MAX_CELL_LENGTH = 50000

_api_retry = retry(
    retry=retry_if_exception_type(gspread.exceptions.APIError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=2, max=10),
    reraise=True,
)


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

    def _get_or_create_sheet(
        self,
        title: str,
        columns: list[str],
        rows: int,
    ) -> gspread.Worksheet:
        spreadsheet = self.get_spreadsheet()
        try:
            sheet = spreadsheet.worksheet(title)
        except gspread.WorksheetNotFound:
            # Create the sheet with headers
            sheet = spreadsheet.add_worksheet(
                title=title,
                rows=rows,
                cols=len(columns),
            )
            sheet.append_row(columns)
        return sheet

    def get_state_sheet(self) -> gspread.Worksheet:
        """Get or create the key/value state worksheet."""
        return self._get_or_create_sheet(
            self._settings.state_sheet_name,
            STATE_COLUMNS,
            rows=100,
        )

    def get_audit_sheet(self) -> gspread.Worksheet:
        """Get or create the Audit worksheet."""
        return self._get_or_create_sheet(
            self._settings.audit_sheet_name,
            AUDIT_COLUMNS,
            rows=5000,  # More rows for audit log
        )


class GoogleSheetsStateStorage(StateStorageInterface):
    """
    Google Sheets implementation of snapshot storage.

    Each key occupies one row; the snapshot is JSON-serialized into
    the value_json column.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    @staticmethod
    def _find_row(rows: list[list[str]], key: str) -> Optional[int]:
        """1-based sheet row index of a key (row 1 is the header)."""
        for idx, row in enumerate(rows[1:], start=2):
            if row and row[0] == key:
                return idx
        return None

    @_api_retry
    def _read_rows(self) -> list[list[str]]:
        return self._client.get_state_sheet().get_all_values()

    def load(self, key: str) -> Optional[Snapshot]:
        try:
            rows = self._read_rows()
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to read state: {e}")

        idx = self._find_row(rows, key)
        if idx is None:
            return None
        row = rows[idx - 1]
        if len(row) < 2 or not row[1]:
            return None
        try:
            document = json.loads(row[1])
        except json.JSONDecodeError as e:
            raise StorageError(f"Stored state for {key} is not valid JSON: {e}")
        if not isinstance(document, dict):
            raise StorageError(f"Stored state for {key} is not a JSON object")
        return document

    @_api_retry
    def _write(self, key: str, payload: str, updated_at: str) -> None:
        sheet = self._client.get_state_sheet()
        idx = self._find_row(sheet.get_all_values(), key)
        if idx is None:
            sheet.append_row([key, payload, updated_at], value_input_option="RAW")
        else:
            sheet.update_cell(idx, 2, payload)
            sheet.update_cell(idx, 3, updated_at)

    def save(self, key: str, snapshot: Snapshot) -> None:
        payload = json.dumps(snapshot, ensure_ascii=False)
        if len(payload) > MAX_CELL_LENGTH:
            raise StorageError(
                f"State for {key} is {len(payload)} characters; "
                f"Google Sheets cells hold at most {MAX_CELL_LENGTH}"
            )
        updated_at = datetime.now(timezone.utc).isoformat()
        try:
            self._write(key, payload, updated_at)
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to save state: {e}")

    def delete(self, key: str) -> bool:
        try:
            sheet = self._client.get_state_sheet()
            idx = self._find_row(sheet.get_all_values(), key)
            if idx is None:
                return False
            sheet.delete_rows(idx)
            return True
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to delete state: {e}")


class GoogleSheetsAuditStorage(AuditStorageInterface):
    """
    Google Sheets implementation of audit log storage.

    Audit events are append-only.
    """

    def __init__(self, client: Optional[GoogleSheetsClient] = None):
        self._client = client or GoogleSheetsClient()

    def _row_to_event(self, row: list) -> AuditEvent:
        """Convert a spreadsheet row to an AuditEvent."""
        def safe_get(index: int, default: str = "") -> str:
            try:
                return row[index] if row[index] else default
            except IndexError:
                return default

        return AuditEvent(
            event_id=UUID(safe_get(0)),
            timestamp=datetime.fromisoformat(safe_get(1)),
            event_type=AuditEventType(safe_get(2)),
            severity=AuditSeverity(safe_get(3)),
            entity_type=safe_get(4) or None,
            entity_id=safe_get(5) or None,
            correlation_id=UUID(safe_get(6)) if safe_get(6) else None,
            description=safe_get(7),
            details=json.loads(safe_get(8)) if safe_get(8) else {},
            error_message=safe_get(9) or None,
            is_user_action=safe_get(10).lower() == "true",
        )

    def _read_events(self) -> list[AuditEvent]:
        try:
            all_rows = self._client.get_audit_sheet().get_all_values()[1:]
        except ConnectionError:
            raise
        except Exception as e:
            raise StorageError(f"Failed to get audit events: {e}")

        events = []
        for row in all_rows:
            if not row or not row[0]:
                continue
            try:
                events.append(self._row_to_event(row))
            except (ValueError, json.JSONDecodeError):
                continue  # Skip malformed rows
        return events

    @_api_retry
    def _append_row(self, row: list) -> None:
        self._client.get_audit_sheet().append_row(row, value_input_option="RAW")

    def append_event(self, event: AuditEvent) -> bool:
        """Append an audit event. Failures are reported, never raised."""
        try:
            self._append_row(event.to_sheets_row())
            return True
        except Exception:
            return False

    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        events = [e for e in self._read_events() if e.correlation_id == correlation_id]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        events = [
            e for e in self._read_events()
            if e.entity_type == entity_type and e.entity_id == entity_id
        ]
        events.sort(key=lambda e: e.timestamp)
        return events

    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        events = self._read_events()
        # Sort newest first
        events.sort(key=lambda e: e.timestamp, reverse=True)
        return events[:limit]
