"""
Remote Sheets Client - Google Sheets v4 REST access.

Used in two places: as a read fallback when the local workbook file is
missing, and to push a local workbook into a newly created spreadsheet.
The client expects an OAuth access token already saved to ``token.json``;
obtaining that token is handled outside this project.
"""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from services.exceptions import RemoteSheetsError, SheetNotFoundError
from services.workbook import Grid, Workbook

logger = logging.getLogger(__name__)

DEFAULT_API_URL = 'https://sheets.googleapis.com/v4'
DEFAULT_TOKEN_PATH = 'token.json'
DEFAULT_TIMEOUT = 30

# Column span requested when reading a whole sheet
READ_RANGE = 'A1:ZZ'


def a1_range(sheet_name: str, cells: str = READ_RANGE) -> str:
    """Build an A1 range, quoting the sheet name."""
    escaped = sheet_name.replace("'", "''")
    return f"'{escaped}'!{cells}"


def to_remote_value(value: Any) -> Any:
    """Convert a cell value to something the values API accepts."""
    if value is None:
        return ''
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class GoogleSheetsClient:
    """Thin client over the spreadsheets and values endpoints."""

    def __init__(self, token_path: str = DEFAULT_TOKEN_PATH,
                 base_url: str = DEFAULT_API_URL,
                 timeout: float = DEFAULT_TIMEOUT,
                 session: Optional[requests.Session] = None):
        self.token_path = token_path
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _access_token(self) -> str:
        try:
            content = json.loads(Path(self.token_path).read_text(encoding='utf-8'))
        except FileNotFoundError as e:
            raise RemoteSheetsError(
                f"Token file {self.token_path} not found. "
                f"Authorize the app and save the token to {self.token_path}."
            ) from e
        except (OSError, ValueError) as e:
            raise RemoteSheetsError(f"Failed to read token file {self.token_path}: {e}") from e

        token = content.get('token') or content.get('access_token')
        if not token:
            raise RemoteSheetsError(f"No access token in {self.token_path}")
        return token

    def _request(self, method: str, path: str, **kwargs) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {'Authorization': f"Bearer {self._access_token()}"}

        try:
            response = self.session.request(
                method, url, headers=headers, timeout=self.timeout, **kwargs
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Sheets API {method} {path} failed: {e}")
            raise RemoteSheetsError(f"Network error calling Sheets API: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Sheets API {method} {path} returned {response.status_code}: {response.text}")
            raise RemoteSheetsError(
                f"Sheets API error ({response.status_code}): {response.text}"
            )

        try:
            return response.json()
        except ValueError as e:
            raise RemoteSheetsError(f"Invalid JSON from Sheets API: {e}") from e

    def list_sheet_names(self, spreadsheet_id: str) -> List[str]:
        data = self._request(
            'GET',
            f"/spreadsheets/{quote(spreadsheet_id, safe='')}",
            params={'fields': 'sheets.properties.title'}
        )
        return [sheet['properties']['title'] for sheet in data.get('sheets', [])]

    def read_grid(self, spreadsheet_id: str, sheet_name: str) -> Grid:
        """
        Read a whole sheet as a grid of strings.

        Raises:
            SheetNotFoundError: If the spreadsheet has no such sheet
            RemoteSheetsError: On any API or transport failure
        """
        names = self.list_sheet_names(spreadsheet_id)
        if sheet_name not in names:
            raise SheetNotFoundError(sheet_name, names)

        data = self._request(
            'GET',
            f"/spreadsheets/{quote(spreadsheet_id, safe='')}/values/"
            f"{quote(a1_range(sheet_name), safe='')}"
        )
        # The values API omits trailing blanks and sends interior blanks as ''
        rows = [
            [cell if cell != '' else None for cell in row]
            for row in data.get('values') or []
        ]
        logger.info(f"Read {len(rows)} rows from remote sheet {sheet_name}")
        return rows

    def read_workbook(self, spreadsheet_id: str, sheet_name: str) -> Workbook:
        """Workbook containing the single sheet ``sheet_name``."""
        return Workbook({sheet_name: self.read_grid(spreadsheet_id, sheet_name)})

    def push_workbook(self, workbook: Workbook, title: str) -> str:
        """
        Create a spreadsheet and copy every sheet of ``workbook`` into it.

        Args:
            workbook: Local workbook to copy
            title: Title of the new spreadsheet

        Returns:
            ID of the created spreadsheet
        """
        body = {
            'properties': {'title': title},
            'sheets': [
                {'properties': {'title': name}} for name in workbook.sheet_names
            ]
        }
        created = self._request('POST', '/spreadsheets', json=body)
        spreadsheet_id = created['spreadsheetId']
        logger.info(f"Spreadsheet created: {spreadsheet_id}")

        data = []
        for name in workbook.sheet_names:
            values = [
                [to_remote_value(v) for v in row]
                for row in workbook.get_grid(name)
            ]
            data.append({'range': a1_range(name, 'A1'), 'values': values})

        if data:
            self._request(
                'POST',
                f"/spreadsheets/{quote(spreadsheet_id, safe='')}/values:batchUpdate",
                json={'valueInputOption': 'RAW', 'data': data}
            )

        logger.info(f"Pushed {len(data)} sheets to spreadsheet {spreadsheet_id}")
        return spreadsheet_id
