"""
In-memory workbook model.

A workbook is an ordered collection of named sheets, each a list of rows
(lists of scalar cell values). Sheets touched through ``set_grid`` or
``append_row`` are tracked so a store can persist only what changed.
"""

from typing import Any, Dict, List, Optional, Sequence

Row = List[Any]
Grid = List[Row]


class Workbook:
    """Ordered mapping of sheet name to grid."""

    def __init__(self, sheets: Optional[Dict[str, Grid]] = None):
        self._sheets: Dict[str, Grid] = {}
        self._modified: List[str] = []
        for name, grid in (sheets or {}).items():
            self._sheets[name] = [list(row) for row in grid]

    @property
    def sheet_names(self) -> List[str]:
        return list(self._sheets)

    @property
    def modified_sheets(self) -> List[str]:
        """Names of sheets changed since load, in workbook order."""
        return [name for name in self._sheets if name in self._modified]

    def has_sheet(self, name: str) -> bool:
        return name in self._sheets

    def get_grid(self, name: str) -> Optional[Grid]:
        """Return the grid for ``name`` or None when the sheet is absent."""
        return self._sheets.get(name)

    def set_grid(self, name: str, grid: Sequence[Sequence[Any]]):
        """Replace (or create, at the end) the sheet ``name``."""
        self._sheets[name] = [list(row) for row in grid]
        self._mark_modified(name)

    def append_row(self, name: str, row: Sequence[Any]):
        self._sheets[name].append(list(row))
        self._mark_modified(name)

    def mark_clean(self):
        self._modified = []

    def _mark_modified(self, name: str):
        if name not in self._modified:
            self._modified.append(name)

    def __repr__(self) -> str:
        return f"Workbook(sheets={self.sheet_names!r})"
