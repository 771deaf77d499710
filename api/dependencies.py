"""
Dependency injection utilities for FastAPI.

Route handlers receive the workbook store and dashboard service through
these dependencies instead of reaching for module-level state, so tests can
swap in an in-memory store with ``app.dependency_overrides``.
"""

import logging
from typing import Optional

from fastapi import Depends

from api.config import settings
from services.dashboard_service import DashboardService
from services.remote_sheets import GoogleSheetsClient
from services.storage_service import ExcelWorkbookStore, WorkbookStore

logger = logging.getLogger(__name__)


def get_store() -> WorkbookStore:
    """
    Get the workbook store dependency.

    A new store is built per request; it holds only the file path, the
    workbook itself is read inside each service call.
    """
    return ExcelWorkbookStore(settings.WORKBOOK_PATH)


def get_remote_client() -> Optional[GoogleSheetsClient]:
    """Get the remote spreadsheet client, or None when fallback is disabled."""
    if not settings.REMOTE_FALLBACK_ENABLED:
        return None

    return GoogleSheetsClient(
        token_path=settings.GOOGLE_TOKEN_PATH,
        base_url=settings.GOOGLE_SHEETS_API_URL,
        timeout=settings.REMOTE_TIMEOUT_SECONDS
    )


def get_dashboard_service(
    store: WorkbookStore = Depends(get_store),
    remote: Optional[GoogleSheetsClient] = Depends(get_remote_client)
) -> DashboardService:
    """
    Get dashboard service dependency.

    Usage:
        @router.get("/endpoint")
        def endpoint(service: DashboardService = Depends(get_dashboard_service)):
            return service.read_active()
    """
    return DashboardService(
        store,
        remote=remote,
        fallback_enabled=settings.REMOTE_FALLBACK_ENABLED,
        active_sheet=settings.ACTIVE_SHEET,
        vendors_sheet=settings.VENDORS_SHEET,
        chat_sheet=settings.CHAT_SHEET,
        active_date_fields=settings.ACTIVE_DATE_FIELDS,
        chat_team=settings.CHAT_TEAM
    )
