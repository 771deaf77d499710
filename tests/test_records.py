"""
Tests for typed sheet records.
"""

from datetime import datetime, timezone

import pytest

from backend.models.records import (
    ChatMessageRecord, PatientRecord, VendorRecord, check_columns, parse_records,
    required_columns
)
from services.exceptions import SchemaMismatchError
from services.seed_data import CHAT_HEADERS, CHAT_ROWS, VENDOR_HEADERS, VENDOR_ROWS
from services.sheet_loader import rows_to_objects


class TestParseRecords:
    """Test parse_records()."""

    def test_vendors(self):
        rows = rows_to_objects([VENDOR_HEADERS] + VENDOR_ROWS)

        vendors = parse_records(rows, VendorRecord, 'Vendors')

        assert len(vendors) == 6
        assert vendors[2].company_name == 'Gentle Hands Doula Services'
        assert vendors[2].rating == '5.0'

    def test_patient_keeps_extra_columns(self):
        dob = datetime(2022, 1, 1, tzinfo=timezone.utc)
        rows = [{'Patient Name': 'Jane', 'DOB': dob, 'Hospice': 'Riverside Hospice'}]

        patient = parse_records(rows, PatientRecord, 'Active')[0]

        assert patient.patient_name == 'Jane'
        assert patient.dob == dob
        assert patient.model_extra['Hospice'] == 'Riverside Hospice'

    def test_missing_column_reports_row(self):
        rows = [{'Patient Name': 'Jane'}, {'Name': 'Tom'}]

        with pytest.raises(SchemaMismatchError) as exc_info:
            parse_records(rows, PatientRecord, 'Active')

        assert exc_info.value.row == 3
        assert exc_info.value.missing == ['Patient Name']
        assert 'Active row 3' in str(exc_info.value)

    def test_empty_value_allowed(self):
        """Required columns must exist; their cells may be blank."""
        rows = [{'Patient Name': None, 'Age': 80}]
        assert parse_records(rows, PatientRecord, 'Active')[0].patient_name is None

    def test_blank_rows_skipped_keeping_row_numbers(self):
        rows = [{'Patient Name': 'Jane'}, {'Patient Name': None, 'Age': ''}, {'Name': 'Tom'}]

        with pytest.raises(SchemaMismatchError) as exc_info:
            parse_records(rows, PatientRecord, 'Active')
        assert exc_info.value.row == 4

        assert len(parse_records(rows[:2], PatientRecord, 'Active')) == 1

    def test_non_string_headers_ignored(self):
        rows = [{'Patient Name': 'Jane', None: 'stray', 7: 'x'}]
        assert parse_records(rows, PatientRecord, 'Active')[0].patient_name == 'Jane'

    def test_empty(self):
        assert parse_records([], ChatMessageRecord, 'Chat') == []


class TestChatMessageRecord:
    """Test chat record helpers."""

    def test_participants_and_timestamp(self):
        rows = rows_to_objects([CHAT_HEADERS] + CHAT_ROWS)
        message = parse_records(rows, ChatMessageRecord, 'Chat')[0]

        assert message.participant_names == ['Alyssa', 'Dr. Moore', 'Christa', 'Amber']
        assert message.sent_at == datetime(2024, 12, 1, 14, 30, 0)

    def test_numeric_timestamp(self):
        message = ChatMessageRecord(
            Timestamp=20241201143000.0, Type='DM', Participants=None,
            Sender='Amber', Message='hi', Status='active'
        )
        assert message.sent_at == datetime(2024, 12, 1, 14, 30, 0)
        assert message.participant_names == []

    def test_bad_timestamp(self):
        message = ChatMessageRecord(
            Timestamp='yesterday', Type='DM', Participants='<Amber>',
            Sender='Amber', Message='hi', Status='active'
        )
        assert message.sent_at is None


class TestColumns:
    """Test header checks."""

    def test_required_columns(self):
        assert required_columns(VendorRecord) == ['Vendor ID', 'Company Name', 'Category']

    def test_check_columns(self):
        check_columns(CHAT_HEADERS, ChatMessageRecord, 'Chat')

        with pytest.raises(SchemaMismatchError) as exc_info:
            check_columns(['Timestamp', 'Message'], ChatMessageRecord, 'Chat')
        assert exc_info.value.missing == ['Type', 'Participants', 'Sender', 'Status']
