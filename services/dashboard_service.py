"""
Dashboard Service - Read and update the dashboard sheets.

Framework-agnostic business logic shared by the API and the CLI. Every call
loads the workbook fresh from the store; writes are a full
read-modify-write with no locking, so two concurrent appends can lose one
of the rows.
"""

import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from backend.models.records import (
    ChatMessageRecord, PatientRecord, VendorRecord, check_columns, parse_records
)
from services.exceptions import (
    SchemaMismatchError, SheetNotFoundError, WorkbookNotFoundError
)
from services.remote_sheets import GoogleSheetsClient
from services.sheet_loader import RowObject, append_row, load_sheet
from services.storage_service import WorkbookStore
from services.workbook import Workbook

logger = logging.getLogger(__name__)

ACTIVE_SHEET = 'Active'
VENDORS_SHEET = 'Vendors'
CHAT_SHEET = 'Chat'

ACTIVE_DATE_FIELDS = [
    'Date', 'DOB', '1st request', '2nd request', 'CP Completed',
    'Prescription Submit', 'Ingestion Date', 'Physician follow up form'
]

DEFAULT_CHAT_TEAM = ['Alyssa', 'Dr. Moore', 'Christa', 'Amber']
DEFAULT_CHAT_TYPE = 'GM'
CHAT_STATUS_ACTIVE = 'active'
CHAT_TIMESTAMP_FORMAT = '%Y%m%d%H%M%S'

# spreadsheetId the browser client sends when working off the local file
LOCAL_SPREADSHEET_ID = 'local'

_BRACKETED = re.compile(r'<([^>]+)>')


def format_chat_timestamp(moment: datetime) -> str:
    """YYYYMMDDHHMMSS in UTC."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.strftime(CHAT_TIMESTAMP_FORMAT)


def parse_recipients(recipients: Union[str, Sequence[str], None]) -> List[str]:
    """
    Split a recipients value into names.

    Accepts a list of names, a ``<A><B>`` participants string, an
    ``@A @B`` mention string or a comma separated string.
    """
    if not recipients:
        return []

    if isinstance(recipients, str):
        if '<' in recipients:
            names = _BRACKETED.findall(recipients)
        elif '@' in recipients:
            names = recipients.split('@')
        else:
            names = recipients.split(',')
    else:
        names = list(recipients)

    return [name.strip() for name in names if name and name.strip()]


def build_participants(user: str, recipients: Union[str, Sequence[str], None],
                       team: Sequence[str]) -> str:
    """
    Participants string for a new chat row.

    ``"all"`` addresses the whole team roster (sender included); named
    recipients are listed after the sender; no recipients means a note to
    self.
    """
    if isinstance(recipients, str) and recipients.strip().lower() == 'all':
        names = list(team)
        if user not in names:
            names.append(user)
    else:
        names = [user]
        for name in parse_recipients(recipients):
            if name not in names:
                names.append(name)

    return ''.join(f"<{name}>" for name in names)


def filter_chat_for_user(rows: Iterable[RowObject], user: str) -> List[RowObject]:
    """Rows whose Participants string contains ``<user>``."""
    token = f"<{user}>"
    return [row for row in rows if token in str(row.get('Participants') or '')]


class DashboardService:
    """
    Dashboard operations over an injected workbook store.

    Args:
        store: Workbook store for the local file
        remote: Client used when the local file is missing (optional)
        fallback_enabled: Allow reads to fall back to ``remote``
        active_date_fields: Active-sheet headers holding date serials
        chat_team: Roster used when a message is addressed to "all"
    """

    def __init__(self, store: WorkbookStore,
                 remote: Optional[GoogleSheetsClient] = None,
                 fallback_enabled: bool = False,
                 active_sheet: str = ACTIVE_SHEET,
                 vendors_sheet: str = VENDORS_SHEET,
                 chat_sheet: str = CHAT_SHEET,
                 active_date_fields: Optional[Sequence[str]] = None,
                 chat_team: Optional[Sequence[str]] = None):
        self.store = store
        self.remote = remote
        self.fallback_enabled = fallback_enabled
        self.active_sheet = active_sheet
        self.vendors_sheet = vendors_sheet
        self.chat_sheet = chat_sheet
        self.active_date_fields = list(
            ACTIVE_DATE_FIELDS if active_date_fields is None else active_date_fields
        )
        self.chat_team = list(DEFAULT_CHAT_TEAM if chat_team is None else chat_team)

    def _can_fall_back(self, spreadsheet_id: Optional[str]) -> bool:
        return (
            self.fallback_enabled
            and self.remote is not None
            and bool(spreadsheet_id)
            and spreadsheet_id != LOCAL_SPREADSHEET_ID
        )

    def _read_rows(self, spreadsheet_id: Optional[str], sheet_name: str,
                   date_fields: Optional[Sequence[str]] = None) -> List[RowObject]:
        try:
            workbook = self.store.load()
            from_remote = False
        except WorkbookNotFoundError:
            if not self._can_fall_back(spreadsheet_id):
                raise
            logger.info(f"Local file not found, falling back to remote spreadsheet {spreadsheet_id}")
            workbook = self.remote.read_workbook(spreadsheet_id, sheet_name)
            from_remote = True

        rows = load_sheet(
            workbook,
            sheet_name,
            date_fields=date_fields,
            require_sheet=True,
            parse_numeric_strings=from_remote
        )
        logger.info(f"Processed {len(rows)} rows from {sheet_name}")
        return rows

    def read_active(self, spreadsheet_id: Optional[str] = None) -> List[RowObject]:
        """Patient rows with date serials converted to datetimes."""
        return self._read_rows(spreadsheet_id, self.active_sheet, self.active_date_fields)

    def read_vendors(self, spreadsheet_id: Optional[str] = None) -> List[RowObject]:
        return self._read_rows(spreadsheet_id, self.vendors_sheet)

    def read_chat(self, spreadsheet_id: Optional[str] = None,
                  user: Optional[str] = None) -> List[RowObject]:
        """Chat rows, optionally only those ``user`` participates in."""
        rows = self._read_rows(spreadsheet_id, self.chat_sheet)
        if user:
            rows = filter_chat_for_user(rows, user)
            logger.info(f"Processed {len(rows)} chat messages for {user}")
        return rows

    def add_chat_message(self, user: str, message: str,
                         message_type: Optional[str] = None,
                         recipients: Union[str, Sequence[str], None] = None,
                         tags: Optional[str] = None,
                         now: Optional[datetime] = None,
                         participants: Optional[str] = None) -> Dict[str, Any]:
        """
        Append one message to the Chat sheet and save the workbook.

        An explicit ``participants`` string (``<A><B>``) is written as given;
        otherwise it is built from ``recipients``.

        Returns:
            ``{'success': True, 'timestamp': 'YYYYMMDDHHMMSS'}``

        Raises:
            WorkbookNotFoundError: If the workbook file is missing
            SheetNotFoundError: If the Chat sheet is missing
            WorkbookIOError: If reading or writing the file fails
        """
        timestamp = format_chat_timestamp(now or datetime.now(timezone.utc))
        row = [
            timestamp,
            message_type or DEFAULT_CHAT_TYPE,
            participants or build_participants(user, recipients, self.chat_team),
            user,
            message,
            CHAT_STATUS_ACTIVE,
            tags or ''
        ]

        workbook = self.store.load()
        append_row(workbook, self.chat_sheet, row)
        self.store.save(workbook)

        logger.info(f"Chat message added by {user} at {timestamp}")
        return {'success': True, 'timestamp': timestamp}

    def list_sheets(self) -> Dict[str, int]:
        """Sheet name to data row count, in workbook order."""
        workbook = self.store.load()
        return {
            name: max(len(workbook.get_grid(name)) - 1, 0)
            for name in workbook.sheet_names
        }

    def read_sheet(self, sheet_name: str) -> List[RowObject]:
        """Rows of any sheet, with Active date handling when it applies."""
        date_fields = self.active_date_fields if sheet_name == self.active_sheet else None
        return load_sheet(self.store.load(), sheet_name, date_fields=date_fields)

    def validate_sheets(self) -> List[Dict[str, Any]]:
        """
        Check the three dashboard sheets against their record schemas.

        Returns:
            One report per sheet: name, status ('ok', 'missing', 'invalid'),
            record count and issue messages
        """
        workbook = self.store.load()
        checks = [
            (self.active_sheet, PatientRecord, self.active_date_fields),
            (self.vendors_sheet, VendorRecord, None),
            (self.chat_sheet, ChatMessageRecord, None),
        ]

        reports = []
        for sheet_name, model, date_fields in checks:
            report = {'sheet': sheet_name, 'status': 'ok', 'records': 0, 'issues': []}
            try:
                rows = load_sheet(workbook, sheet_name, date_fields=date_fields,
                                  skip_blank_rows=False)
                grid = workbook.get_grid(sheet_name)
                if grid:
                    check_columns(grid[0], model, sheet_name)
                report['records'] = len(parse_records(rows, model, sheet_name))
            except SheetNotFoundError as e:
                report['status'] = 'missing'
                report['issues'].append(str(e))
            except SchemaMismatchError as e:
                report['status'] = 'invalid'
                report['issues'].append(str(e))

            logger.info(f"Validated {sheet_name}: {report['status']} ({report['records']} records)")
            reports.append(report)

        return reports

    def load_workbook(self) -> Workbook:
        return self.store.load()
