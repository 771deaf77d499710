"""
Pydantic schemas for request/response validation.

This package contains all Pydantic models used for API request validation
and response serialization.
"""

from api.schemas.common import ErrorResponse, HealthCheckResponse
from api.schemas.chat_schema import ChatMessageCreate, ChatMessageCreateResponse

__all__ = [
    # Common
    'ErrorResponse',
    'HealthCheckResponse',

    # Chat
    'ChatMessageCreate',
    'ChatMessageCreateResponse',
]
