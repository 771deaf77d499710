"""Record models for the dashboard sheets."""
from backend.models.records import (
    ChatMessageRecord, PatientRecord, VendorRecord, check_columns, parse_records
)

__all__ = [
    'ChatMessageRecord',
    'PatientRecord',
    'VendorRecord',
    'check_columns',
    'parse_records',
]
