"""
Typed record schemas for the dashboard sheets.

Each sheet kind gets a Pydantic model whose field aliases are the sheet's
header labels. Required columns must be present in every row object; their
cell values may still be empty. Columns not declared here are kept as
extra attributes.
"""

import re
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, Field, ValidationError

from services.exceptions import SchemaMismatchError

CellValue = Optional[Union[datetime, int, float, str]]

PARTICIPANT_PATTERN = re.compile(r'<([^>]+)>')
CHAT_TIMESTAMP_FORMAT = '%Y%m%d%H%M%S'

R = TypeVar('R', bound=BaseModel)


class PatientRecord(BaseModel):
    """One row of the Active sheet."""

    patient_name: CellValue = Field(..., alias='Patient Name')
    age: CellValue = Field(None, alias='Age')
    area: CellValue = Field(None, alias='Area')
    cp_doctor: CellValue = Field(None, alias='CP Doctor')
    date: CellValue = Field(None, alias='Date')
    dob: CellValue = Field(None, alias='DOB')
    first_request: CellValue = Field(None, alias='1st request')
    second_request: CellValue = Field(None, alias='2nd request')
    cp_completed: CellValue = Field(None, alias='CP Completed')
    prescription_submit: CellValue = Field(None, alias='Prescription Submit')
    ingestion_date: CellValue = Field(None, alias='Ingestion Date')
    physician_follow_up_form: CellValue = Field(None, alias='Physician follow up form')
    invoice_amount: CellValue = Field(None, alias='invoice amount')
    paid: CellValue = Field(None, alias='PAID')

    class Config:
        populate_by_name = True
        extra = 'allow'


class VendorRecord(BaseModel):
    """One row of the Vendors sheet."""

    vendor_id: CellValue = Field(..., alias='Vendor ID')
    company_name: CellValue = Field(..., alias='Company Name')
    category: CellValue = Field(..., alias='Category')
    service_type: CellValue = Field(None, alias='Service Type')
    contact_person: CellValue = Field(None, alias='Contact Person')
    phone: CellValue = Field(None, alias='Phone')
    email: CellValue = Field(None, alias='Email')
    address: CellValue = Field(None, alias='Address')
    website: CellValue = Field(None, alias='Website')
    notes: CellValue = Field(None, alias='Notes')
    rating: CellValue = Field(None, alias='Rating')
    last_contact: CellValue = Field(None, alias='Last Contact')
    status: CellValue = Field(None, alias='Status')

    class Config:
        populate_by_name = True
        extra = 'allow'


class ChatMessageRecord(BaseModel):
    """One row of the Chat sheet."""

    timestamp: CellValue = Field(..., alias='Timestamp')
    type: CellValue = Field(..., alias='Type')
    participants: CellValue = Field(..., alias='Participants')
    sender: CellValue = Field(..., alias='Sender')
    message: CellValue = Field(..., alias='Message')
    status: CellValue = Field(..., alias='Status')
    tags: CellValue = Field(None, alias='Tags')

    class Config:
        populate_by_name = True
        extra = 'allow'

    @property
    def participant_names(self) -> List[str]:
        """Names from the ``<Name><Name>`` participants string."""
        return PARTICIPANT_PATTERN.findall(str(self.participants or ''))

    @property
    def sent_at(self) -> Optional[datetime]:
        """Timestamp parsed from its YYYYMMDDHHMMSS form, if it has one."""
        raw = self.timestamp
        if isinstance(raw, float) and raw.is_integer():
            raw = int(raw)
        try:
            return datetime.strptime(str(raw), CHAT_TIMESTAMP_FORMAT)
        except ValueError:
            return None


def required_columns(model: Type[BaseModel]) -> List[str]:
    """Header labels the model needs on every row."""
    return [
        field.alias or name
        for name, field in model.model_fields.items()
        if field.is_required()
    ]


def check_columns(headers: Sequence[Any], model: Type[BaseModel], sheet_name: str):
    """
    Verify a header row carries every required column.

    Raises:
        SchemaMismatchError: Listing the missing columns
    """
    present = {h for h in headers if isinstance(h, str)}
    missing = [col for col in required_columns(model) if col not in present]
    if missing:
        raise SchemaMismatchError(
            sheet_name, f"missing columns: {', '.join(missing)}", missing=missing
        )


def parse_records(rows: Iterable[Dict[Any, Any]], model: Type[R],
                  sheet_name: str) -> List[R]:
    """
    Validate header-keyed row objects into typed records.

    Args:
        rows: Row objects as produced by the sheet loader, blank rows
            included so row numbers line up with the sheet; they are skipped
        model: Record type for the sheet
        sheet_name: Used in error messages

    Returns:
        Records in row order

    Raises:
        SchemaMismatchError: On the first row that does not validate; the
            reported row number is the spreadsheet row (header is row 1)
    """
    records = []
    for row_num, row in enumerate(rows, start=2):
        data = {k: v for k, v in row.items() if isinstance(k, str)}
        if all(v is None or v == '' for v in data.values()):
            continue
        try:
            records.append(model.model_validate(data))
        except ValidationError as e:
            missing = [
                str(err['loc'][0]) for err in e.errors()
                if err['type'] == 'missing' and err['loc']
            ]
            if missing:
                raise SchemaMismatchError(
                    sheet_name, f"missing columns: {', '.join(missing)}",
                    row=row_num, missing=missing
                ) from e
            raise SchemaMismatchError(sheet_name, str(e), row=row_num) from e
    return records
