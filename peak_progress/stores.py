import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional, Protocol, Tuple

import gspread
from google.oauth2.service_account import Credentials

from peak_progress.config import Settings

logger = logging.getLogger(__name__)

SHEET_COLS = ["Key", "Value"]
# Google Sheets refuses cells longer than this.
SHEETS_CELL_LIMIT = 50_000
SCOPES = ["https://www.googleapis.com/auth/spreadsheets", "https://www.googleapis.com/auth/drive"]


class KeyValueStore(Protocol):
    def read_raw(self, key: str) -> Optional[str]: ...

    def write_raw(self, key: str, value: str) -> bool: ...


class MemoryStore:
    """Keeps values in a mapping, e.g. a dict in tests or ``st.session_state``."""

    def __init__(self, data: Optional[MutableMapping[str, Any]] = None, max_chars: Optional[int] = None) -> None:
        self.data: MutableMapping[str, Any] = {} if data is None else data
        self.max_chars = max_chars

    def read_raw(self, key: str) -> Optional[str]:
        v = self.data.get(key)
        return v if isinstance(v, str) else None

    def write_raw(self, key: str, value: str) -> bool:
        if self.max_chars is not None and len(value) > self.max_chars:
            logger.warning("Memory store quota exceeded (%d > %d chars)", len(value), self.max_chars)
            return False
        self.data[key] = value
        return True


class FileStore:
    def __init__(self, path: os.PathLike) -> None:
        self.path = Path(path).expanduser()

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as ex:
            logger.warning("Unreadable store file %s (%s: %s)", self.path, type(ex).__name__, ex)
            return {}
        return data if isinstance(data, dict) else {}

    def read_raw(self, key: str) -> Optional[str]:
        v = self._read_all().get(key)
        return v if isinstance(v, str) else None

    def write_raw(self, key: str, value: str) -> bool:
        data = self._read_all()
        data[key] = value
        tmp_name = ""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=self.path.parent, prefix=f".{self.path.name}.", delete=False
            ) as fh:
                tmp_name = fh.name
                json.dump(data, fh, ensure_ascii=False, indent=2, sort_keys=True)
                fh.write("\n")
            os.replace(tmp_name, self.path)
        except OSError as ex:
            logger.warning("Could not write store file %s (%s: %s)", self.path, type(ex).__name__, ex)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return False
        return True


def ensure_header(worksheet: gspread.Worksheet) -> None:
    header = worksheet.row_values(1)
    if not header or [h.strip() for h in header[: len(SHEET_COLS)]] != SHEET_COLS:
        worksheet.update(range_name="A1:B1", values=[SHEET_COLS])


class SheetStore:
    """One ``Key | Value`` row per storage key in a worksheet."""

    def __init__(self, worksheet: gspread.Worksheet) -> None:
        self.worksheet = worksheet

    def _row_of(self, vals: list, key: str) -> Optional[int]:
        for i, row in enumerate(vals[1:], start=2):
            if row and row[0].strip() == key:
                return i
        return None

    def read_raw(self, key: str) -> Optional[str]:
        vals = self.worksheet.get_all_values()
        row = self._row_of(vals, key)
        if row is None:
            return None
        cells = vals[row - 1]
        return cells[1] if len(cells) > 1 else ""

    def write_raw(self, key: str, value: str) -> bool:
        if len(value) > SHEETS_CELL_LIMIT:
            logger.warning("Climb log too large for one sheet cell (%d > %d chars)", len(value), SHEETS_CELL_LIMIT)
            return False
        try:
            row = self._row_of(self.worksheet.get_all_values(), key)
            if row is None:
                self.worksheet.append_row([key, value], value_input_option="RAW")
            else:
                self.worksheet.update(range_name=f"A{row}:B{row}", values=[[key, value]], value_input_option="RAW")
        except gspread.exceptions.GSpreadException as ex:
            logger.warning("Sheet rejected write for %r (%s: %s)", key, type(ex).__name__, ex)
            return False
        return True


def get_sheet(secrets: Mapping[str, Any]) -> gspread.Spreadsheet:
    if "gcp_service_account" not in secrets or "google_sheet_url" not in secrets:
        raise KeyError("Missing secrets: gcp_service_account or google_sheet_url")
    creds = Credentials.from_service_account_info(dict(secrets["gcp_service_account"]), scopes=SCOPES)
    return gspread.authorize(creds).open_by_url(secrets["google_sheet_url"])


def ws(spreadsheet: gspread.Spreadsheet, name: str) -> gspread.Worksheet:
    try:
        return spreadsheet.worksheet(name)
    except gspread.WorksheetNotFound:
        logger.info("Creating worksheet %r", name)
        return spreadsheet.add_worksheet(title=name, rows=20, cols=len(SHEET_COLS))


def open_store(
    settings: Settings,
    secrets: Mapping[str, Any],
    session: Optional[MutableMapping[str, Any]] = None,
) -> Tuple[KeyValueStore, str]:
    """Build the configured store.

    Returns the store and a setup error string; a Sheets backend that cannot
    be opened falls back to the local file store and reports why.
    """
    backend = settings.storage_backend
    if not backend:
        backend = "sheets" if "gcp_service_account" in secrets and "google_sheet_url" in secrets else "file"
    if backend == "memory":
        return MemoryStore(session), ""
    if backend == "sheets":
        try:
            worksheet = ws(get_sheet(secrets), settings.worksheet_name)
            ensure_header(worksheet)
            return SheetStore(worksheet), ""
        except Exception as ex:
            setup_error = f"{type(ex).__name__}: {ex}"
            logger.warning("Sheets store unavailable, using %s (%s)", settings.local_store_path, setup_error)
            return FileStore(settings.local_store_path), setup_error
    return FileStore(settings.local_store_path), ""
