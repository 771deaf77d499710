"""
Application configuration using Pydantic Settings.

This module manages all configuration from environment variables.
"""

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Configuration
    API_TITLE: str = "Hospice Dashboard API"
    API_VERSION: str = "1.0.0"
    API_DESCRIPTION: str = "Patient, vendor and team chat data served from the dashboard workbook"
    API_PREFIX: str = "/api"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    DEBUG: bool = False
    RELOAD: bool = False

    # Workbook Configuration
    WORKBOOK_PATH: str = "Dashboard Clone.xlsx"
    ACTIVE_SHEET: str = "Active"
    VENDORS_SHEET: str = "Vendors"
    CHAT_SHEET: str = "Chat"
    ACTIVE_DATE_FIELDS: List[str] = [
        "Date", "DOB", "1st request", "2nd request", "CP Completed",
        "Prescription Submit", "Ingestion Date", "Physician follow up form"
    ]

    # Chat Configuration
    CHAT_TEAM: List[str] = ["Alyssa", "Dr. Moore", "Christa", "Amber"]

    # Remote Spreadsheet Fallback (Google Sheets)
    REMOTE_FALLBACK_ENABLED: bool = False
    GOOGLE_TOKEN_PATH: str = "token.json"
    GOOGLE_SHEETS_API_URL: str = "https://sheets.googleapis.com/v4"
    REMOTE_TIMEOUT_SECONDS: float = 30.0

    # Logging Configuration
    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = "api.log"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # CORS Configuration
    CORS_ORIGINS: List[str] = ["*"]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: List[str] = ["*"]
    CORS_ALLOW_HEADERS: List[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are loaded only once.
    """
    return Settings()


# Create global settings instance
settings = get_settings()
