"""
Tests for GoogleSheetsClient with a fake requests session.
"""

import json
from datetime import datetime
from urllib.parse import unquote

import pytest
import requests

from services.exceptions import RemoteSheetsError, SheetNotFoundError
from services.remote_sheets import GoogleSheetsClient, a1_range, to_remote_value
from services.workbook import Workbook


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=''):
        self.status_code = status_code
        self._payload = payload
        self.text = text or json.dumps(payload)

    def json(self):
        if self._payload is None:
            raise ValueError('no json')
        return self._payload


class FakeSession:
    """Records requests and answers from a list of canned responses."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, **kwargs):
        self.requests.append({'method': method, 'url': url, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def token_path(tmp_path):
    path = tmp_path / 'token.json'
    path.write_text(json.dumps({'token': 'abc'}))
    return str(path)


def make_client(token_path, responses):
    session = FakeSession(responses)
    client = GoogleSheetsClient(token_path=token_path, base_url='https://sheets.test/v4/',
                                session=session)
    return client, session


class TestReadGrid:
    """Test reading a sheet."""

    def test_reads_values(self, token_path):
        client, session = make_client(token_path, [
            FakeResponse(payload={'sheets': [{'properties': {'title': 'Active'}}]}),
            FakeResponse(payload={'values': [['Patient Name', 'DOB'], ['Jane', ''], ['Tom', '44562']]}),
        ])

        grid = client.read_grid('sheet-1', 'Active')

        assert grid == [['Patient Name', 'DOB'], ['Jane', None], ['Tom', '44562']]
        assert session.requests[0]['headers']['Authorization'] == 'Bearer abc'
        assert session.requests[0]['params'] == {'fields': 'sheets.properties.title'}
        assert unquote(session.requests[1]['url']) == \
            "https://sheets.test/v4/spreadsheets/sheet-1/values/'Active'!A1:ZZ"

    def test_missing_sheet(self, token_path):
        client, _ = make_client(token_path, [
            FakeResponse(payload={'sheets': [{'properties': {'title': 'Vendors'}}]}),
        ])

        with pytest.raises(SheetNotFoundError) as exc_info:
            client.read_grid('sheet-1', 'Active')
        assert exc_info.value.available == ['Vendors']

    def test_empty_sheet(self, token_path):
        client, _ = make_client(token_path, [
            FakeResponse(payload={'sheets': [{'properties': {'title': 'Chat'}}]}),
            FakeResponse(payload={'range': "'Chat'!A1:ZZ1000"}),
        ])

        workbook = client.read_workbook('sheet-1', 'Chat')
        assert workbook.get_grid('Chat') == []

    def test_http_error(self, token_path):
        client, _ = make_client(token_path, [FakeResponse(status_code=403, payload={'error': 'denied'})])

        with pytest.raises(RemoteSheetsError):
            client.list_sheet_names('sheet-1')

    def test_network_error(self, token_path):
        client, _ = make_client(token_path, [requests.exceptions.ConnectionError('down')])

        with pytest.raises(RemoteSheetsError):
            client.list_sheet_names('sheet-1')

    def test_missing_token(self, tmp_path):
        client = GoogleSheetsClient(token_path=str(tmp_path / 'token.json'),
                                    session=FakeSession([]))

        with pytest.raises(RemoteSheetsError) as exc_info:
            client.list_sheet_names('sheet-1')
        assert 'token.json' in str(exc_info.value)


class TestPushWorkbook:
    """Test copying a workbook to a new spreadsheet."""

    def test_push(self, token_path):
        client, session = make_client(token_path, [
            FakeResponse(payload={'spreadsheetId': 'new-id'}),
            FakeResponse(payload={'totalUpdatedCells': 4}),
        ])
        workbook = Workbook({
            'Active': [['Patient Name', 'DOB'], ['Jane', datetime(2022, 1, 1)]],
            'Chat': [['Timestamp'], [None]],
        })

        assert client.push_workbook(workbook, 'Hospice Dashboard Clone') == 'new-id'

        create, update = session.requests
        assert create['json']['properties']['title'] == 'Hospice Dashboard Clone'
        assert [s['properties']['title'] for s in create['json']['sheets']] == ['Active', 'Chat']
        assert update['url'].endswith('/spreadsheets/new-id/values:batchUpdate')
        assert update['json']['valueInputOption'] == 'RAW'
        assert update['json']['data'][0] == {
            'range': "'Active'!A1",
            'values': [['Patient Name', 'DOB'], ['Jane', '2022-01-01T00:00:00']]
        }
        assert update['json']['data'][1]['values'] == [['Timestamp'], ['']]


def test_a1_range_quotes_sheet_names():
    assert a1_range("Bob's Sheet") == "'Bob''s Sheet'!A1:ZZ"


def test_to_remote_value():
    assert to_remote_value(None) == ''
    assert to_remote_value(3) == 3
