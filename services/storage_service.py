"""
Storage Service - Load and save the dashboard workbook.

This module provides the store abstraction request handlers depend on: a
``load()`` / ``save()`` pair over a single named resource. The workbook is
read fresh on every ``load()``; nothing is cached between calls.
"""

import os
import logging
import tempfile
import zipfile
from pathlib import Path
from typing import Any, Dict, List, Optional

import openpyxl
from openpyxl.cell.cell import ILLEGAL_CHARACTERS_RE
from openpyxl.utils.exceptions import InvalidFileException

from services.exceptions import WorkbookIOError, WorkbookNotFoundError
from services.workbook import Grid, Workbook

logger = logging.getLogger(__name__)

# Default workbook location
DEFAULT_WORKBOOK_PATH = 'Dashboard Clone.xlsx'


def _trim_row(row) -> List[Any]:
    """Drop trailing empty cells from a row read out of openpyxl."""
    values = list(row)
    while values and (values[-1] is None or values[-1] == ''):
        values.pop()
    return values


def _write_cell(ws, row: int, column: int, value: Any):
    """
    Write one value as literal cell content.

    Strings starting with "=" are stored as text rather than formulas, and
    control characters the xlsx format cannot hold are removed.
    """
    if isinstance(value, str):
        value = ILLEGAL_CHARACTERS_RE.sub('', value)
    cell = ws.cell(row=row, column=column, value=value)
    if isinstance(value, str) and value.startswith('='):
        cell.data_type = 's'
    return cell


class WorkbookStore:
    """
    Interface for workbook persistence.

    Implementations read the whole workbook on ``load()`` and write the whole
    workbook on ``save()``. There is no locking: two writers that load the
    same state and save in turn will lose the first writer's change.
    """

    def load(self) -> Workbook:
        raise NotImplementedError

    def save(self, workbook: Workbook):
        raise NotImplementedError

    def exists(self) -> bool:
        raise NotImplementedError

    def describe(self) -> str:
        return self.__class__.__name__


class ExcelWorkbookStore(WorkbookStore):
    """
    Workbook store backed by a single .xlsx file.

    Values are read with ``data_only=True`` so formula cells yield their
    cached results. Saving only rewrites sheets the workbook marks as
    modified; other sheets keep their formulas and formatting.
    """

    def __init__(self, path: str = DEFAULT_WORKBOOK_PATH):
        """
        Initialize workbook store.

        Args:
            path: Path to the .xlsx file (default: 'Dashboard Clone.xlsx')
        """
        self.path = str(path)

    def exists(self) -> bool:
        return Path(self.path).is_file()

    def describe(self) -> str:
        return self.path

    def load(self) -> Workbook:
        """
        Read every sheet of the workbook file into memory.

        Returns:
            Workbook with one grid per sheet, in file order

        Raises:
            WorkbookNotFoundError: If the file does not exist
            WorkbookIOError: If the file cannot be opened or parsed
        """
        if not self.exists():
            raise WorkbookNotFoundError(Path(self.path).name)

        logger.info(f"Reading workbook: {self.path}")

        try:
            wb = openpyxl.load_workbook(self.path, data_only=True, read_only=True)
        except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
            logger.error(f"Failed to open workbook {self.path}: {e}")
            raise WorkbookIOError(f"Failed to read workbook {self.path}: {e}") from e

        sheets: Dict[str, Grid] = {}
        try:
            for sheet_name in wb.sheetnames:
                ws = wb[sheet_name]
                grid = [_trim_row(row) for row in ws.iter_rows(values_only=True)]
                # Formatted but empty rows show up at the end of the used range;
                # blank rows between data rows stay so saving keeps row positions
                while grid and not grid[-1]:
                    grid.pop()
                sheets[sheet_name] = grid
        finally:
            wb.close()

        logger.debug(f"Available sheets: {list(sheets)}")
        return Workbook(sheets)

    def save(self, workbook: Workbook):
        """
        Persist modified sheets, replacing the file atomically.

        The new content is written to a temporary file next to the target and
        moved into place with ``os.replace``, so an interrupted write leaves
        the previous file intact.

        Raises:
            WorkbookIOError: If the file cannot be read or written
        """
        target = Path(self.path)
        modified = workbook.modified_sheets

        if target.exists():
            try:
                wb = openpyxl.load_workbook(target)
            except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
                raise WorkbookIOError(f"Failed to read workbook {self.path}: {e}") from e
        else:
            logger.info(f"Creating new workbook: {self.path}")
            wb = openpyxl.Workbook()
            wb.remove(wb.active)
            modified = workbook.sheet_names

        for sheet_name in modified:
            if sheet_name in wb.sheetnames:
                ws = wb[sheet_name]
                if ws.max_row:
                    ws.delete_rows(1, ws.max_row)
            else:
                ws = wb.create_sheet(sheet_name)

            for row_idx, row in enumerate(workbook.get_grid(sheet_name), 1):
                for col_idx, value in enumerate(row, 1):
                    _write_cell(ws, row_idx, col_idx, value)

        target.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            suffix=target.suffix or '.xlsx',
            dir=str(target.parent)
        )
        os.close(fd)

        try:
            wb.save(temp_path)
            os.replace(temp_path, target)
        except (OSError, ValueError, TypeError) as e:
            logger.error(f"Failed to write workbook {self.path}: {e}")
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise WorkbookIOError(f"Failed to write workbook {self.path}: {e}") from e

        workbook.mark_clean()
        logger.info(f"Saved workbook {self.path} (sheets rewritten: {modified})")


class InMemoryWorkbookStore(WorkbookStore):
    """Workbook store held in a dict. Used for tests and dry runs."""

    def __init__(self, sheets: Optional[Dict[str, Grid]] = None, name: str = 'memory'):
        self._sheets = None if sheets is None else {
            sheet_name: [list(row) for row in grid]
            for sheet_name, grid in sheets.items()
        }
        self.name = name
        self.save_count = 0

    def exists(self) -> bool:
        return self._sheets is not None

    def describe(self) -> str:
        return self.name

    def load(self) -> Workbook:
        if self._sheets is None:
            raise WorkbookNotFoundError(self.name)
        return Workbook(self._sheets)

    def save(self, workbook: Workbook):
        self._sheets = {
            sheet_name: [list(row) for row in workbook.get_grid(sheet_name)]
            for sheet_name in workbook.sheet_names
        }
        self.save_count += 1
        workbook.mark_clean()
