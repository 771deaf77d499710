"""
Chat-related Pydantic schemas.

This module contains schemas for posting new team chat messages.
"""

from typing import List, Optional, Union
from pydantic import BaseModel, Field


class ChatMessageCreate(BaseModel):
    """Request body for appending a chat message."""

    user: str = Field(..., min_length=1, description="Sender name")
    message: str = Field(..., min_length=1, description="Message text")
    type: Optional[str] = Field(None, description="Message type: GM, DM or NOTE (default: GM)")
    recipients: Optional[Union[str, List[str]]] = Field(
        None,
        description="'all', a list of names, or an '@Name @Name' string"
    )
    participants: Optional[str] = Field(
        None,
        description="Explicit participants string, e.g. '<Alyssa><Christa>'; overrides recipients"
    )
    tags: Optional[str] = Field(None, description="Free-form tags")

    class Config:
        json_schema_extra = {
            "example": {
                "user": "Alyssa",
                "message": "Family meeting moved to 3pm",
                "type": "GM",
                "recipients": "all"
            }
        }


class ChatMessageCreateResponse(BaseModel):
    """Response after a chat message was appended."""

    success: bool = Field(True, description="Operation success flag")
    timestamp: str = Field(..., description="Message timestamp (YYYYMMDDHHMMSS)")

    class Config:
        json_schema_extra = {
            "example": {
                "success": True,
                "timestamp": "20241201143000"
            }
        }
