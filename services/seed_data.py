"""
Sample sheet content for a fresh dashboard workbook.

Vendors is a small directory of hospice service partners. Chat uses the
participant coding ``<Name><Name>`` with message types GM (group),
DM (direct) and NOTE (personal note).
"""

import logging
from typing import Any, List

from services.storage_service import WorkbookStore
from services.workbook import Workbook

logger = logging.getLogger(__name__)

VENDOR_HEADERS = [
    'Vendor ID', 'Company Name', 'Category', 'Service Type', 'Contact Person',
    'Phone', 'Email', 'Address', 'Website', 'Notes', 'Rating', 'Last Contact', 'Status'
]

VENDOR_ROWS = [
    ['V001', 'Serenity Cremation Services', 'Cremation', 'Cremation & Memorial',
     'Sarah Johnson', '(555) 123-4567', 'sarah@serenitycremation.com',
     '123 Peaceful Lane, Riverside, CA 92501', 'www.serenitycremation.com',
     'Reliable service, good pricing', '4.8', '2024-01-15', 'Active'],
    ['V002', 'Compassionate Care Pharmacies', 'Pharmacy', 'Hospice Medications',
     'Dr. Michael Chen', '(555) 234-5678', 'mchen@compcarepharm.com',
     '456 Medical Plaza, Riverside, CA 92503', 'www.compcarepharm.com',
     'Specializes in pain management meds', '4.9', '2024-01-20', 'Active'],
    ['V003', 'Gentle Hands Doula Services', 'Doula', 'End-of-Life Support',
     'Maria Rodriguez', '(555) 345-6789', 'maria@gentlehands.com',
     '789 Comfort Way, Riverside, CA 92505', 'www.gentlehands.com',
     'Excellent bedside manner, 24/7 availability', '5.0', '2024-01-18', 'Active'],
    ['V004', 'Eternal Rest Funeral Home', 'Funeral Services', 'Funeral & Memorial',
     'Robert Williams', '(555) 456-7890', 'rwilliams@eternalrest.com',
     '321 Memorial Drive, Riverside, CA 92507', 'www.eternalrest.com',
     'Traditional services, family-owned', '4.7', '2024-01-12', 'Active'],
    ['V005', 'Hospice Equipment Supply Co.', 'Medical Equipment', 'Durable Medical Equipment',
     'Jennifer Davis', '(555) 567-8901', 'jdavis@hospiceequipment.com',
     '654 Medical Supply Blvd, Riverside, CA 92509', 'www.hospiceequipment.com',
     'Quick delivery, wide selection', '4.6', '2024-01-22', 'Active'],
    ['V006', 'Peaceful Transitions Counseling', 'Counseling', 'Grief & Bereavement',
     'Dr. Lisa Thompson', '(555) 678-9012', 'lthompson@peacefultransitions.com',
     '987 Healing Circle, Riverside, CA 92511', 'www.peacefultransitions.com',
     'Licensed therapists, sliding scale fees', '4.9', '2024-01-16', 'Active'],
]

CHAT_HEADERS = ['Timestamp', 'Type', 'Participants', 'Sender', 'Message', 'Status', 'Tags']

_TEAM = '<Alyssa><Dr. Moore><Christa><Amber>'

CHAT_ROWS = [
    ['20241201143000', 'GM', _TEAM, 'Alyssa',
     'Hey team, where are we on the Johnson case?', 'active', 'patient-update'],
    ['20241201143100', 'GM', _TEAM, 'Dr. Moore',
     'I just reviewed the medication list, all looks good', 'active', 'medical-review'],
    ['20241201143200', 'DM', '<Alyssa><Christa>', 'Christa',
     'Family meeting scheduled for tomorrow at 2pm', 'active', 'meeting'],
    ['20241201143300', 'DM', '<Alyssa><Amber>', 'Alyssa',
     'Hey Amber, can you prep the meeting notes?', 'active', 'task'],
    ['20241201143400', 'GM', _TEAM, 'Amber',
     'Welcome Amber! Please connect with Alyssa on this new project', 'active', 'onboarding'],
    ['20241201143500', 'DM', '<Dr. Moore><Christa>', 'Dr. Moore',
     'Christa, can you review the Johnson medication schedule?', 'active', 'medical-task'],
    ['20241201143600', 'GM', _TEAM, 'Alyssa',
     'Insurance approval came through for the Smith family!', 'active', 'good-news'],
    ['20241201143700', 'DM', '<Alyssa><Donnie>', 'Alyssa',
     'Hey Donnie, lets get Amber onboarded properly', 'active', 'onboarding'],
    ['20241201143800', 'GM', '<Alyssa><Donnie><Amber>', 'Donnie',
     'Welcome Amber! Please connect with Alyssa on this new project', 'active', 'welcome'],
    ['20241201143900', 'NOTE', '<Alyssa>', 'Alyssa',
     'Patient timeline updated - family meeting scheduled', 'active', 'patient-timeline'],
    ['20241201144000', 'NOTE', '<Dr. Moore>', 'Dr. Moore',
     'Medication review completed - no changes needed', 'active', 'medical-note'],
    ['20241201144100', 'DM', '<Christa><Amber>', 'Christa',
     'Amber, here are the key contacts for the Johnson case', 'active', 'contacts'],
    ['20241201144200', 'GM', _TEAM, 'Amber',
     'Thanks everyone! Excited to be part of the team', 'active', 'introduction'],
]


def vendors_grid() -> List[List[Any]]:
    return [list(VENDOR_HEADERS)] + [list(row) for row in VENDOR_ROWS]


def chat_grid() -> List[List[Any]]:
    return [list(CHAT_HEADERS)] + [list(row) for row in CHAT_ROWS]


def seed_sheet(store: WorkbookStore, sheet_name: str, grid: List[List[Any]],
               replace: bool = False) -> bool:
    """
    Write a sample sheet into the store's workbook.

    Args:
        store: Workbook store to update
        sheet_name: Sheet to create
        grid: Header row followed by data rows
        replace: Overwrite the sheet if it already exists

    Returns:
        True if the sheet was written, False if it existed and was kept
    """
    workbook = store.load() if store.exists() else Workbook()

    if workbook.has_sheet(sheet_name) and not replace:
        logger.info(f"Sheet {sheet_name} already exists in {store.describe()}, skipping")
        return False

    workbook.set_grid(sheet_name, grid)
    store.save(workbook)
    logger.info(f"Wrote {len(grid) - 1} sample rows to {sheet_name} in {store.describe()}")
    return True
