"""
Custom exceptions for the dashboard service layer.

Two failure kinds are surfaced to callers: something that should exist was
not found (workbook file, named sheet), or an I/O fault happened while
reading or writing (local file or remote spreadsheet service).
"""

from typing import Iterable, List, Optional


class DashboardError(Exception):
    """Base exception for dashboard data errors"""
    pass


class NotFoundError(DashboardError):
    """Raised when a workbook or sheet does not exist"""
    pass


class WorkbookNotFoundError(NotFoundError):
    """Raised when the backing workbook file is missing"""

    def __init__(self, path: str):
        self.path = path
        super().__init__(
            f"{path} file not found. Please ensure the file exists."
        )


class SheetNotFoundError(NotFoundError):
    """Raised when a required sheet is absent from the workbook"""

    def __init__(self, sheet_name: str, available: Optional[Iterable[str]] = None):
        self.sheet_name = sheet_name
        self.available: List[str] = list(available or [])
        super().__init__(
            f"{sheet_name} sheet not found. "
            f"Available sheets: {', '.join(self.available)}"
        )


class DashboardIOError(DashboardError):
    """Raised on any read/write fault that is not a missing resource"""
    pass


class WorkbookIOError(DashboardIOError):
    """Raised when the workbook file cannot be read or written"""
    pass


class RemoteSheetsError(DashboardIOError):
    """Raised when the remote spreadsheet service call fails"""
    pass


class SchemaMismatchError(DashboardError):
    """Raised when sheet rows do not match the expected record schema"""

    def __init__(self, sheet_name: str, message: str, row: Optional[int] = None,
                 missing: Optional[Iterable[str]] = None):
        self.sheet_name = sheet_name
        self.row = row
        self.missing: List[str] = list(missing or [])
        location = f"{sheet_name} row {row}" if row is not None else sheet_name
        super().__init__(f"{location}: {message}")
