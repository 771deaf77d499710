"""
Tests for workbook stores.

Uses real .xlsx files written to a temporary directory.
"""

import openpyxl
import pytest

from services.exceptions import WorkbookIOError, WorkbookNotFoundError
from services.seed_data import VENDOR_ROWS, chat_grid, seed_sheet, vendors_grid
from services.sheet_loader import append_row, load_sheet
from services.storage_service import ExcelWorkbookStore, InMemoryWorkbookStore
from services.workbook import Workbook


class TestExcelWorkbookStore:
    """Test loading and saving .xlsx files."""

    def test_load_preserves_sheet_order(self, store):
        workbook = store.load()
        assert workbook.sheet_names == ['Active', 'Vendors', 'Chat']

    def test_load_values(self, store):
        rows = load_sheet(store.load(), 'Active')
        assert rows[0]['Patient Name'] == 'Jane Johnson'
        assert rows[0]['DOB'] == 44562
        assert rows[1]['PAID'] is None

    def test_missing_file(self, tmp_path):
        store = ExcelWorkbookStore(str(tmp_path / 'Dashboard Clone.xlsx'))

        assert not store.exists()
        with pytest.raises(WorkbookNotFoundError) as exc_info:
            store.load()
        assert 'Dashboard Clone.xlsx' in str(exc_info.value)

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / 'broken.xlsx'
        path.write_bytes(b'not a zip file')

        with pytest.raises(WorkbookIOError):
            ExcelWorkbookStore(str(path)).load()

    def test_blank_rows_skipped(self, tmp_path, make_workbook):
        """Empty rows inside the used range do not become row objects."""
        path = make_workbook(tmp_path / 'gaps.xlsx', {
            'Chat': [['Timestamp', 'Message'], ['1', 'hi'], [None, None], ['2', 'bye']]
        })

        rows = load_sheet(ExcelWorkbookStore(str(path)).load(), 'Chat')

        assert [r['Message'] for r in rows] == ['hi', 'bye']

    def test_blank_row_survives_append(self, tmp_path, make_workbook):
        path = make_workbook(tmp_path / 'gaps.xlsx', {
            'Chat': [['Timestamp', 'Message'], ['1', 'hi'], [None, None], ['2', 'bye']]
        })
        store = ExcelWorkbookStore(str(path))

        workbook = store.load()
        append_row(workbook, 'Chat', ['3', 'new'])
        store.save(workbook)

        rows = list(openpyxl.load_workbook(path)['Chat'].iter_rows(values_only=True))
        assert rows == [
            ('Timestamp', 'Message'), ('1', 'hi'), (None, None), ('2', 'bye'), ('3', 'new')
        ]

    def test_formula_like_text_saved_as_text(self, store, workbook_path):
        workbook = store.load()
        append_row(workbook, 'Chat', ['1', 'GM', '<Amber>', 'Amber', '=see above', 'active'])
        store.save(workbook)

        assert load_sheet(store.load(), 'Chat')[-1]['Message'] == '=see above'
        cell = openpyxl.load_workbook(workbook_path)['Chat'].cell(row=len(workbook.get_grid('Chat')), column=5)
        assert cell.data_type == 's'

    def test_control_characters_removed(self, store):
        workbook = store.load()
        append_row(workbook, 'Chat', ['1', 'GM', '<Amber>', 'Amber', 'line\x00one\x07'])
        store.save(workbook)

        assert load_sheet(store.load(), 'Chat')[-1]['Message'] == 'lineone'

    def test_save_appended_row_round_trip(self, store):
        workbook = store.load()
        append_row(workbook, 'Chat', ['20250101120000', 'GM', '<Amber>', 'Amber', 'hello', 'active', ''])
        store.save(workbook)

        rows = load_sheet(store.load(), 'Chat')
        assert rows[-1]['Message'] == 'hello'
        assert rows[-1]['Tags'] is None
        assert workbook.modified_sheets == []

    def test_save_keeps_unmodified_sheets_formulas(self, tmp_path):
        """Only modified sheets are rewritten; formulas elsewhere survive."""
        path = tmp_path / 'formulas.xlsx'
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = 'Active'
        ws.append(['Age', 'Double'])
        ws.append([40, '=A2*2'])
        chat = wb.create_sheet('Chat')
        chat.append(['Timestamp', 'Message'])
        wb.save(path)

        store = ExcelWorkbookStore(str(path))
        workbook = store.load()
        append_row(workbook, 'Chat', ['1', 'hi'])
        store.save(workbook)

        reopened = openpyxl.load_workbook(path)
        assert reopened.sheetnames == ['Active', 'Chat']
        assert reopened['Active']['B2'].value == '=A2*2'
        assert reopened['Chat']['B2'].value == 'hi'

    def test_save_creates_new_file(self, tmp_path):
        store = ExcelWorkbookStore(str(tmp_path / 'new.xlsx'))
        workbook = Workbook()
        workbook.set_grid('Vendors', [['Vendor ID'], ['V001']])

        store.save(workbook)

        assert store.exists()
        assert load_sheet(store.load(), 'Vendors') == [{'Vendor ID': 'V001'}]

    def test_save_leaves_no_temp_files(self, store, workbook_path):
        workbook = store.load()
        append_row(workbook, 'Chat', ['1'])
        store.save(workbook)

        assert [p.name for p in workbook_path.parent.iterdir()] == [workbook_path.name]


class TestInMemoryWorkbookStore:
    """Test the dict-backed store."""

    def test_load_returns_copy(self, memory_store):
        first = memory_store.load()
        append_row(first, 'Chat', ['x'])

        assert len(memory_store.load().get_grid('Chat')) == len(first.get_grid('Chat')) - 1

    def test_missing(self):
        store = InMemoryWorkbookStore()
        assert not store.exists()
        with pytest.raises(WorkbookNotFoundError):
            store.load()

    def test_save_counts(self, memory_store):
        memory_store.save(memory_store.load())
        assert memory_store.save_count == 1


class TestSeedSheet:
    """Test writing sample sheets."""

    def test_seed_into_missing_workbook(self):
        store = InMemoryWorkbookStore()

        assert seed_sheet(store, 'Vendors', vendors_grid()) is True
        assert len(store.load().get_grid('Vendors')) == len(VENDOR_ROWS) + 1

    def test_existing_sheet_kept(self, memory_store):
        assert seed_sheet(memory_store, 'Chat', [['Timestamp']]) is False
        assert memory_store.save_count == 0

    def test_replace(self, memory_store):
        assert seed_sheet(memory_store, 'Chat', chat_grid()[:2], replace=True) is True
        assert len(memory_store.load().get_grid('Chat')) == 2
