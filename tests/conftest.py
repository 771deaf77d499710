"""
Pytest configuration and fixtures for dashboard tests.
"""

import pytest
import openpyxl
from fastapi.testclient import TestClient

from api.dependencies import get_remote_client, get_store
from api.main import app
from services.seed_data import chat_grid, vendors_grid
from services.storage_service import ExcelWorkbookStore, InMemoryWorkbookStore

ACTIVE_HEADERS = ['Patient Name', 'Age', 'Area', 'DOB', 'Ingestion Date', 'PAID']


def write_workbook(path, sheets):
    """Write an ordered dict of sheet name -> grid to an .xlsx file."""
    wb = openpyxl.Workbook()
    wb.remove(wb.active)
    for name, grid in sheets.items():
        ws = wb.create_sheet(name)
        for row in grid:
            ws.append(row)
    wb.save(path)
    return path


@pytest.fixture
def make_workbook():
    """Helper that writes sheets to an .xlsx file and returns its path."""
    return write_workbook


@pytest.fixture
def active_grid():
    """Active sheet with one complete row and one short row."""
    return [
        list(ACTIVE_HEADERS),
        ['Jane Johnson', 82, 'Riverside', 44562, 44927, 'Yes'],
        ['Tom Smith', 75, 'Corona', None, 'pending'],
    ]


@pytest.fixture
def sample_sheets(active_grid):
    """Sheets of a dashboard workbook, in file order."""
    return {
        'Active': active_grid,
        'Vendors': vendors_grid(),
        'Chat': chat_grid(),
    }


@pytest.fixture
def workbook_path(tmp_path, sample_sheets):
    """Dashboard workbook written to a temporary .xlsx file."""
    return write_workbook(tmp_path / 'Dashboard Clone.xlsx', sample_sheets)


@pytest.fixture
def store(workbook_path):
    return ExcelWorkbookStore(str(workbook_path))


@pytest.fixture
def memory_store(sample_sheets):
    return InMemoryWorkbookStore(sample_sheets)


@pytest.fixture
def client(store):
    """API client wired to the temporary workbook."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_remote_client] = lambda: None
    yield TestClient(app)
    app.dependency_overrides.clear()
