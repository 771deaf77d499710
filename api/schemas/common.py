"""
Common Pydantic schemas used across the API.

This module contains shared schemas for errors and health responses.
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field
from datetime import datetime


class ErrorResponse(BaseModel):
    """Standard error response format."""

    error: str = Field(..., description="Error message")
    detail: Optional[Dict[str, Any]] = Field(None, description="Additional error details")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Error timestamp")
    path: Optional[str] = Field(None, description="Request path that caused the error")

    class Config:
        json_schema_extra = {
            "example": {
                "error": "spreadsheetId is required",
                "detail": None,
                "timestamp": "2025-10-15T12:00:00Z",
                "path": "/api/read-active"
            }
        }


class HealthCheckResponse(BaseModel):
    """Health check response."""

    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(default_factory=datetime.utcnow, description="Health check timestamp")
    version: str = Field(..., description="API version")
    workbook: str = Field(..., description="Workbook file status")
    remote_fallback: str = Field(..., description="Remote spreadsheet fallback status")

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2025-10-15T12:00:00Z",
                "version": "1.0.0",
                "workbook": "available",
                "remote_fallback": "disabled"
            }
        }
