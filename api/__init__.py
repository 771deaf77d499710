"""
FastAPI application for the hospice dashboard.

This package contains the REST API that serves patient, vendor and team
chat data out of the dashboard workbook.
"""

__version__ = "1.0.0"
