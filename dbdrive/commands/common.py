"""Shared helpers for db-drive commands: driver construction and rendering."""

import datetime
import json
import logging
from contextlib import contextmanager
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, Optional

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from ..config import settings
from ..database import CatalogDriver, ColumnInfo, SchemaInfo, TableInfo, ViewInfo, create_driver
from ..errors import DriveError
from ..navigation import ChildItem, DatabaseNavigator, DriveInfo
from ..paths import ObjectType

console = Console()
error_console = Console(stderr=True)

# Global command line overrides, filled in by the app callback
state: Dict[str, Any] = {
    "provider": None,
    "connection_string": None,
}


def configure_logging(verbose: bool = False) -> None:
    """Route library logging through rich; --verbose switches to DEBUG."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=error_console, show_path=False)],
        force=True,
    )


def build_driver() -> CatalogDriver:
    """Create the driver from settings and command line overrides."""
    return create_driver(
        state["provider"] or settings.provider,
        connection_string=state["connection_string"] or settings.connection_string,
        timeout=settings.timeout,
        max_read_result=settings.max_read_result,
        bulk_read_limit=settings.bulk_read_limit,
        case_sensitive=settings.case_sensitive,
    )


def build_navigator(max_read_result: Optional[int] = None) -> DatabaseNavigator:
    return DatabaseNavigator(build_driver(), drive_name=settings.drive_name, max_read_result=max_read_result)


@contextmanager
def handle_errors():
    """Print DriveErrors as one red line and exit with status 1."""
    try:
        yield
    except DriveError as e:
        error_console.print(f"[red]Error: {escape(e.message)}[/red]")
        raise typer.Exit(1)


def json_default(value: Any) -> Any:
    if hasattr(value, "to_dict"):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    if isinstance(value, Decimal):
        return str(value)
    return str(value)


def to_json(value: Any) -> str:
    if isinstance(value, Enum):
        value = value.value
    return json.dumps(value, default=json_default)


def kind_of(item: Any) -> str:
    if isinstance(item, DriveInfo):
        return "Database"
    if isinstance(item, SchemaInfo):
        return "Schema"
    if isinstance(item, ObjectType):
        return "ObjectType"
    if isinstance(item, TableInfo):
        return "Table"
    if isinstance(item, ViewInfo):
        return "View"
    if isinstance(item, dict):
        return "Row"
    return type(item).__name__


def format_value(value: Any) -> str:
    if value is None:
        return "[dim]NULL[/dim]"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "0x" + bytes(value).hex()
    if isinstance(value, Enum):
        return value.value
    return str(value)


def rows_table(rows: Iterable[Dict[str, Any]], title: Optional[str] = None) -> Optional[Table]:
    """Render result rows; returns None when there are no rows."""
    table = None
    for row in rows:
        if table is None:
            table = Table(title=title)
            for column in row:
                table.add_column(column, style="cyan" if not table.columns else None)
        table.add_row(*(format_value(v) for v in row.values()))
    return table


def columns_table(columns: Iterable[ColumnInfo], title: str = "Columns") -> Table:
    table = Table(title=title)
    table.add_column("#", style="dim")
    table.add_column("Column", style="cyan")
    table.add_column("Type", style="green")
    table.add_column("Nullable", style="yellow")
    for column in columns:
        table.add_row(
            str(column.ordinal_position or ""),
            column.column_name,
            column.type_name,
            "Yes" if column.nullable else "No",
        )
    return table


def item_table(item: Any, title: Optional[str] = None) -> Table:
    """Key/value rendering of a metadata item, without its columns."""
    table = Table(title=title or kind_of(item), show_header=False)
    table.add_column("Property", style="cyan")
    table.add_column("Value")
    values = item.to_dict() if hasattr(item, "to_dict") else {"value": item}
    for key, value in values.items():
        if key == "columns":
            continue
        table.add_row(key, format_value(value))
    return table


def print_child_items(items: Iterable[ChildItem]) -> int:
    """Print containers as a path listing and rows as one table per object.

    Returns:
        Number of items printed
    """
    count = 0
    listing = None
    row_path = None
    rows = []

    def flush_rows():
        if rows:
            console.print(rows_table(rows, title=row_path))
            rows.clear()

    for child in items:
        count += 1
        if child.is_container:
            flush_rows()
            if listing is None:
                listing = Table()
                listing.add_column("Path", style="cyan")
                listing.add_column("Kind", style="green")
            listing.add_row(child.path, kind_of(child.item))
            continue
        if listing is not None:
            console.print(listing)
            listing = None
        if child.path != row_path:
            flush_rows()
            row_path = child.path
        rows.append(child.item)

    flush_rows()
    if listing is not None:
        console.print(listing)
    return count
