"""
Sheet Loader - Turn workbook grids into header-keyed row objects.

This module is a pure transform over a workbook that is already in memory.
Reading or writing the workbook file is done by a store (see
``services.storage_service``) before/after these functions run.
"""

import logging
import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence

from services.exceptions import SheetNotFoundError
from services.workbook import Grid, Workbook

logger = logging.getLogger(__name__)

# Days between the spreadsheet serial epoch (1899-12-30) and 1970-01-01
EXCEL_EPOCH_OFFSET_DAYS = 25569
SECONDS_PER_DAY = 86400

UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

RowObject = Dict[str, Any]


def is_finite_number(value: Any) -> bool:
    """True for int/float values that are finite. Booleans do not count."""
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    return False


def excel_serial_to_datetime(serial: float) -> datetime:
    """
    Convert a spreadsheet date serial to a UTC datetime.

    Args:
        serial: Day count in the spreadsheet epoch (e.g. 44562)

    Returns:
        Timezone-aware datetime, ``(serial - 25569) * 86400`` seconds
        after the Unix epoch.
    """
    seconds = (serial - EXCEL_EPOCH_OFFSET_DAYS) * SECONDS_PER_DAY
    return UNIX_EPOCH + timedelta(seconds=seconds)


def _serial_or_value(serial: float, value: Any) -> Any:
    # Serials past the datetime range (phone numbers typed into a date
    # column and the like) are returned as entered
    try:
        return excel_serial_to_datetime(serial)
    except (OverflowError, ValueError):
        logger.debug(f"Date serial out of range, keeping raw value: {value!r}")
        return value


def normalize_date_value(value: Any, parse_numeric_strings: bool = False) -> Any:
    """
    Normalize one date-field cell.

    Finite numbers are treated as date serials. Datetime/date cells (openpyxl
    returns those for date-formatted cells) are pinned to UTC so every date
    field comes out with the same type. Anything else passes through.
    """
    if is_finite_number(value):
        return _serial_or_value(value, value)

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if parse_numeric_strings and isinstance(value, str) and value.strip():
        try:
            serial = float(value)
        except ValueError:
            return value
        if math.isfinite(serial):
            return _serial_or_value(serial, value)

    return value


def is_blank_row(row: Sequence[Any]) -> bool:
    return all(cell is None or cell == '' for cell in row)


def rows_to_objects(grid: Grid, skip_blank_rows: bool = False) -> List[RowObject]:
    """
    Pair the header row with every following row.

    Missing trailing cells become None; extra cells past the header width
    are dropped. With ``skip_blank_rows`` rows holding no values produce no
    object; the grid itself keeps them.
    """
    if not grid:
        return []

    headers = grid[0]
    objects = []
    for row in grid[1:]:
        if skip_blank_rows and is_blank_row(row):
            continue
        obj = {}
        for i, header in enumerate(headers):
            obj[header] = row[i] if i < len(row) else None
        objects.append(obj)
    return objects


def load_sheet(workbook: Workbook, sheet_name: str,
               date_fields: Optional[Iterable[str]] = None,
               require_sheet: bool = True,
               parse_numeric_strings: bool = False,
               skip_blank_rows: bool = True) -> List[RowObject]:
    """
    Load a sheet as an ordered list of row objects.

    Args:
        workbook: Workbook already read from storage
        sheet_name: Exact sheet name to resolve
        date_fields: Headers whose numeric values are date serials
        require_sheet: Raise SheetNotFoundError if the sheet is absent
        parse_numeric_strings: Also treat numeric strings in date fields as
            serials (remote grids carry every cell as a string)
        skip_blank_rows: Leave rows with no values out of the result

    Returns:
        Row objects in original row order

    Raises:
        SheetNotFoundError: If the sheet is absent and required
    """
    grid = workbook.get_grid(sheet_name)

    if grid is None:
        if require_sheet:
            raise SheetNotFoundError(sheet_name, workbook.sheet_names)
        logger.info(f"Sheet {sheet_name} not present, returning no rows")
        return []

    if not grid:
        logger.info(f"No data found in {sheet_name} sheet.")
        return []

    logger.debug(f"Found {len(grid)} rows in {sheet_name} sheet, headers: {grid[0]}")

    data = rows_to_objects(grid, skip_blank_rows=skip_blank_rows)

    fields = set(date_fields or ())
    if fields:
        for obj in data:
            for key in fields:
                if key in obj:
                    obj[key] = normalize_date_value(obj[key], parse_numeric_strings)

    logger.debug(f"Processed {len(data)} data rows from {sheet_name}")
    return data


def append_row(workbook: Workbook, sheet_name: str, row_values: Sequence[Any]):
    """
    Append one row at the end of an existing sheet.

    The sheet must already exist with a header row. Row values are not
    checked against the header count. The caller persists the workbook.

    Raises:
        SheetNotFoundError: If the sheet is absent or has no header row
    """
    grid = workbook.get_grid(sheet_name)
    if not grid:
        raise SheetNotFoundError(sheet_name, workbook.sheet_names)

    workbook.append_row(sheet_name, row_values)
    logger.debug(f"Appended row to {sheet_name} (now {len(grid)} rows)")
