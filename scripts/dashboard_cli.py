#!/usr/bin/env python3
"""
Dashboard Workbook CLI

Maintenance commands for the dashboard workbook: inspect sheets, seed the
sample Vendors and Chat sheets, validate sheet schemas and copy the
workbook into a new Google spreadsheet.

Usage:
    python scripts/dashboard_cli.py sheets
    python scripts/dashboard_cli.py read Chat --user Christa
    python scripts/dashboard_cli.py seed-vendors
    python scripts/dashboard_cli.py seed-chat --replace
    python scripts/dashboard_cli.py validate
    python scripts/dashboard_cli.py push-remote --title "Hospice Dashboard Clone"
"""

import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import json
import logging
from datetime import date, datetime

import click
from dotenv import load_dotenv

from services.dashboard_service import DashboardService, filter_chat_for_user
from services.exceptions import DashboardError
from services.remote_sheets import DEFAULT_API_URL, DEFAULT_TOKEN_PATH, GoogleSheetsClient
from services.seed_data import chat_grid, seed_sheet, vendors_grid
from services.storage_service import DEFAULT_WORKBOOK_PATH, ExcelWorkbookStore

# Load environment variables
load_dotenv()

# Configure logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_FILE = os.getenv('LOG_FILE', 'cli.log')

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(LOG_FILE),
        logging.StreamHandler(sys.stderr)
    ]
)

logger = logging.getLogger('dashboard_cli')


def _json_default(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


@click.group()
@click.option('--workbook', '-w', envvar='WORKBOOK_PATH', default=DEFAULT_WORKBOOK_PATH,
              show_default=True, help='Path to the dashboard workbook')
@click.pass_context
def cli(ctx, workbook):
    """Dashboard workbook maintenance CLI"""
    ctx.ensure_object(dict)
    store = ExcelWorkbookStore(workbook)
    ctx.obj['store'] = store
    ctx.obj['service'] = DashboardService(store)


@cli.command('sheets')
@click.pass_context
def sheets_cmd(ctx):
    """List sheets and their data row counts."""
    service = ctx.obj['service']
    try:
        counts = service.list_sheets()
    except DashboardError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    click.echo(f"📊 {service.store.describe()}")
    for name, rows in counts.items():
        click.echo(f"  {name}: {rows} rows")


@cli.command('read')
@click.argument('sheet')
@click.option('--user', '-u', help='Only chat rows this user participates in')
@click.pass_context
def read_cmd(ctx, sheet, user):
    """Print the rows of SHEET as JSON."""
    service = ctx.obj['service']
    try:
        rows = service.read_sheet(sheet)
    except DashboardError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(1)

    if user:
        rows = filter_chat_for_user(rows, user)

    click.echo(json.dumps(rows, indent=2, default=_json_default))


@cli.command('seed-vendors')
@click.option('--replace', is_flag=True, help='Overwrite an existing Vendors sheet')
@click.pass_context
def seed_vendors_cmd(ctx, replace):
    """Add the sample Vendors sheet."""
    _seed(ctx.obj['service'], ctx.obj['service'].vendors_sheet, vendors_grid(), replace)


@cli.command('seed-chat')
@click.option('--replace', is_flag=True, help='Overwrite an existing Chat sheet')
@click.pass_context
def seed_chat_cmd(ctx, replace):
    """Add the sample Chat sheet (GM/DM/NOTE messages)."""
    _seed(ctx.obj['service'], ctx.obj['service'].chat_sheet, chat_grid(), replace)


def _seed(service: DashboardService, sheet_name: str, grid, replace: bool):
    try:
        written = seed_sheet(service.store, sheet_name, grid, replace=replace)
    except DashboardError as e:
        logger.error(f"Seeding {sheet_name} failed: {e}", exc_info=True)
        click.echo(f"✗ Seeding {sheet_name} failed: {e}", err=True)
        sys.exit(1)

    if written:
        click.echo(f"✓ {sheet_name} sheet written with {len(grid) - 1} sample rows")
    else:
        click.echo(f"ℹ️  {sheet_name} sheet already exists (use --replace to overwrite)")


@cli.command('validate')
@click.pass_context
def validate_cmd(ctx):
    """Check the Active, Vendors and Chat sheets against their schemas."""
    service = ctx.obj['service']
    click.echo(f"🔍 Validating {service.store.describe()}...")

    try:
        reports = service.validate_sheets()
    except DashboardError as e:
        click.echo(f"✗ Validation failed: {e}", err=True)
        sys.exit(1)

    failed = False
    for report in reports:
        mark = '✓' if report['status'] == 'ok' else '✗'
        click.echo(f"{mark} {report['sheet']}: {report['status'].upper()} "
                   f"({report['records']} records)")
        for issue in report['issues']:
            click.echo(f"    {issue}")
        failed = failed or report['status'] != 'ok'

    if failed:
        sys.exit(1)


@cli.command('push-remote')
@click.option('--title', '-t', default='Hospice Dashboard Clone', show_default=True,
              help='Title of the new spreadsheet')
@click.option('--token', envvar='GOOGLE_TOKEN_PATH', default=DEFAULT_TOKEN_PATH,
              show_default=True, help='Path to the saved OAuth token')
@click.option('--api-url', envvar='GOOGLE_SHEETS_API_URL', default=DEFAULT_API_URL,
              help='Sheets API base URL')
@click.pass_context
def push_remote_cmd(ctx, title, token, api_url):
    """Copy every sheet of the workbook into a new Google spreadsheet."""
    service = ctx.obj['service']
    client = GoogleSheetsClient(token_path=token, base_url=api_url)

    click.echo(f"📤 Pushing {service.store.describe()} to Google Sheets...")
    try:
        spreadsheet_id = client.push_workbook(service.load_workbook(), title)
    except DashboardError as e:
        logger.error(f"Push failed: {e}", exc_info=True)
        click.echo(f"✗ Push failed: {e}", err=True)
        sys.exit(1)

    click.echo(f"✓ Spreadsheet created: https://docs.google.com/spreadsheets/d/{spreadsheet_id}")


if __name__ == '__main__':
    cli()
