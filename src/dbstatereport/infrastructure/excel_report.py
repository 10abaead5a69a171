"""
Excel export of database state records.

Writes a single "Database State" sheet with a styled header row, frozen
header, autofilter, and colored Status / RW / Access cells.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from dbstatereport.domain.models import RECORD_HEADERS, StateRecord


logger = logging.getLogger(__name__)

SHEET_NAME = "Database State"


class Colors:
    """Report color palette (hex codes without #)."""

    HEADER_BG = "203764"
    HEADER_TEXT = "FFFFFF"
    PASS_BG = "C6EFCE"
    PASS_TEXT = "006100"
    FAIL_BG = "FFC7CE"
    FAIL_TEXT = "9C0006"
    WARN_BG = "FFEB9C"
    WARN_TEXT = "9C5700"
    BORDER = "BFBFBF"


class Fonts:
    HEADER = Font(name="Segoe UI", size=11, bold=True, color=Colors.HEADER_TEXT)
    DATA = Font(name="Segoe UI", size=10)
    PASS = Font(name="Segoe UI", size=10, bold=True, color=Colors.PASS_TEXT)
    FAIL = Font(name="Segoe UI", size=10, bold=True, color=Colors.FAIL_TEXT)
    WARN = Font(name="Segoe UI", size=10, bold=True, color=Colors.WARN_TEXT)


class Fills:
    HEADER = PatternFill(start_color=Colors.HEADER_BG, end_color=Colors.HEADER_BG, fill_type="solid")
    PASS = PatternFill(start_color=Colors.PASS_BG, end_color=Colors.PASS_BG, fill_type="solid")
    FAIL = PatternFill(start_color=Colors.FAIL_BG, end_color=Colors.FAIL_BG, fill_type="solid")
    WARN = PatternFill(start_color=Colors.WARN_BG, end_color=Colors.WARN_BG, fill_type="solid")


THIN_BORDER = Border(
    left=Side(style="thin", color=Colors.BORDER),
    right=Side(style="thin", color=Colors.BORDER),
    top=Side(style="thin", color=Colors.BORDER),
    bottom=Side(style="thin", color=Colors.BORDER),
)


@dataclass(frozen=True)
class ColumnDef:
    """Column definition for the sheet."""
    field: str
    width: int
    centered: bool = False


COLUMNS = (
    ColumnDef("computer_name", 20),
    ColumnDef("instance_name", 18),
    ColumnDef("sql_instance", 26),
    ColumnDef("database_name", 28),
    ColumnDef("read_write", 14, centered=True),
    ColumnDef("status", 13, centered=True),
    ColumnDef("access", 18, centered=True),
)

# value -> (font, fill); anything else keeps the plain data style
VALUE_STYLES = {
    "ONLINE": (Fonts.PASS, Fills.PASS),
    "OFFLINE": (Fonts.FAIL, Fills.FAIL),
    "EMERGENCY": (Fonts.FAIL, Fills.FAIL),
    "READ_ONLY": (Fonts.WARN, Fills.WARN),
    "SINGLE_USER": (Fonts.WARN, Fills.WARN),
    "RESTRICTED_USER": (Fonts.WARN, Fills.WARN),
}

STYLED_FIELDS = frozenset({"read_write", "status", "access"})


class StateWorkbookWriter:
    """
    Builds the database state workbook.

    Usage:
        writer = StateWorkbookWriter()
        writer.add_records(records)
        writer.save("output/db_state.xlsx")
    """

    def __init__(self) -> None:
        self.wb = Workbook()
        self.ws = self.wb.active
        self.ws.title = SHEET_NAME
        self._row_count = 0
        self._write_header()

    def _write_header(self) -> None:
        for col, column in enumerate(COLUMNS, start=1):
            cell = self.ws.cell(row=1, column=col, value=RECORD_HEADERS[column.field])
            cell.font = Fonts.HEADER
            cell.fill = Fills.HEADER
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.border = THIN_BORDER
            self.ws.column_dimensions[get_column_letter(col)].width = column.width
        self.ws.freeze_panes = "A2"

    def add_record(self, record: StateRecord) -> None:
        """Append one record as a data row."""
        row = self._row_count + 2
        data = record.to_dict()
        for col, column in enumerate(COLUMNS, start=1):
            value = data[column.field]
            cell = self.ws.cell(row=row, column=col, value=value)
            if isinstance(value, str) and value.startswith("="):
                # Keep names like "=1+1" as text, not formulas
                cell.data_type = "s"
            cell.font = Fonts.DATA
            cell.border = THIN_BORDER
            if column.centered:
                cell.alignment = Alignment(horizontal="center")
            if column.field in STYLED_FIELDS and value in VALUE_STYLES:
                cell.font, cell.fill = VALUE_STYLES[value]
        self._row_count += 1

    def add_records(self, records: Iterable[StateRecord]) -> None:
        for record in records:
            self.add_record(record)

    def save(self, path: Path | str) -> Path:
        """
        Save the workbook.

        The output directory is created if it doesn't exist.

        Raises:
            PermissionError: If the file is open in another program
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        last_col = get_column_letter(len(COLUMNS))
        self.ws.auto_filter.ref = f"A1:{last_col}{self._row_count + 1}"

        self.wb.save(path)
        logger.info("Report saved: %s (%d databases)", path, self._row_count)
        return path


def write_state_workbook(records: Iterable[StateRecord], path: Path | str) -> Path:
    """Write records to an .xlsx file and return its path."""
    writer = StateWorkbookWriter()
    writer.add_records(records)
    return writer.save(path)
