"""
Dashboard router - Read sheets and post chat messages.

This module provides the endpoints the browser dashboard calls. Every
request reads the workbook fresh; internal failures come back as a generic
500 error and the cause is logged.
"""

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_dashboard_service
from api.schemas.chat_schema import ChatMessageCreate, ChatMessageCreateResponse
from services.dashboard_service import DashboardService
from services.exceptions import DashboardError

logger = logging.getLogger(__name__)

# Create router
router = APIRouter(tags=['dashboard'])

READ_FAILED = 'Failed to read data'
WRITE_FAILED = 'Failed to add chat message'


@router.get('/read-active')
def read_active(
    spreadsheet_id: str = Query(..., alias='spreadsheetId', min_length=1,
                                description="Spreadsheet ID ('local' for the local workbook)"),
    service: DashboardService = Depends(get_dashboard_service)
):
    """
    Read patient rows from the Active sheet.

    Date columns (Date, DOB, 1st request, ...) holding spreadsheet date
    serials come back as ISO-8601 UTC timestamps.

    **Example:**
    ```bash
    curl "http://localhost:3000/api/read-active?spreadsheetId=local"
    ```
    """
    try:
        return service.read_active(spreadsheet_id)
    except DashboardError as e:
        logger.error(f"Error reading Active tab: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=READ_FAILED
        )


@router.get('/read-vendors')
def read_vendors(
    spreadsheet_id: str = Query(..., alias='spreadsheetId', min_length=1),
    service: DashboardService = Depends(get_dashboard_service)
):
    """
    Read the vendor directory from the Vendors sheet.

    **Example:**
    ```bash
    curl "http://localhost:3000/api/read-vendors?spreadsheetId=local"
    ```
    """
    try:
        return service.read_vendors(spreadsheet_id)
    except DashboardError as e:
        logger.error(f"Error reading Vendors tab: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=READ_FAILED
        )


@router.get('/read-chat')
def read_chat(
    spreadsheet_id: str = Query(..., alias='spreadsheetId', min_length=1),
    user: Optional[str] = Query(None, description="Only messages this user participates in"),
    service: DashboardService = Depends(get_dashboard_service)
):
    """
    Read chat messages from the Chat sheet.

    With `user`, only rows whose Participants contain `<user>` are returned.

    **Example:**
    ```bash
    curl "http://localhost:3000/api/read-chat?spreadsheetId=local&user=Christa"
    ```
    """
    try:
        return service.read_chat(spreadsheet_id, user=user)
    except DashboardError as e:
        logger.error(f"Error reading Chat tab: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=READ_FAILED
        )


@router.post('/add-chat-message', response_model=ChatMessageCreateResponse)
def add_chat_message(
    payload: ChatMessageCreate,
    service: DashboardService = Depends(get_dashboard_service)
):
    """
    Append a chat message to the Chat sheet.

    The row written is `[timestamp, type, participants, sender, message,
    "active", tags]`. The whole workbook is rewritten; concurrent posts are
    not serialized and one of them may be lost.

    **Example:**
    ```bash
    curl -X POST http://localhost:3000/api/add-chat-message \\
         -H "Content-Type: application/json" \\
         -d '{"user": "Alyssa", "message": "On my way", "type": "GM", "recipients": "all"}'
    ```
    """
    try:
        result = service.add_chat_message(
            payload.user,
            payload.message,
            message_type=payload.type,
            recipients=payload.recipients,
            tags=payload.tags,
            participants=payload.participants
        )
    except DashboardError as e:
        logger.error(f"Error adding chat message: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=WRITE_FAILED
        )

    return ChatMessageCreateResponse(**result)
