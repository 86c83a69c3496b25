"""db-drive - Main entry point."""

from typing import Optional

import typer
from rich.console import Console

from .commands import browse, query
from .commands.common import configure_logging, state
from .config import mask_connection_string, settings
from .database import supported_providers

app = typer.Typer(
    name="db-drive",
    help="Browse relational databases as a drive of schemas, tables, views and rows",
    add_completion=False,
)

# Add commands
app.command("ls")(browse.ls)
app.command("names")(browse.names)
app.command("get")(browse.get)
app.command("exists")(browse.exists)
app.command("parent")(browse.parent)
app.command("query")(query.query)

console = Console()


@app.command()
def config():
    """Show current configuration."""
    if state["connection_string"]:
        connection = mask_connection_string(state["connection_string"])
    else:
        connection = settings.masked_connection_string()
    console.print("[bold]Current Configuration[/bold]")
    console.print(f"  Provider: {state['provider'] or settings.provider}")
    console.print(f"  Connection: {connection or 'Not set'}")
    console.print(f"  Drive Root: {settings.drive_name}:\\")
    console.print(f"  Max Read Result: {settings.max_read_result}")
    console.print(f"  Bulk Read Limit: {settings.bulk_read_limit}")
    console.print(f"  Timeout: {settings.timeout}s")
    console.print(f"  Case Sensitive: {'Backend default' if settings.case_sensitive is None else settings.case_sensitive}")
    console.print(f"  Supported Providers: {', '.join(supported_providers())}")


@app.callback()
def main(
    provider: Optional[str] = typer.Option(None, "--provider", "-p", help="Provider identifier (or DBDRIVE_PROVIDER env)"),
    connection_string: Optional[str] = typer.Option(
        None, "--connection-string", "-c", help="Backend connection string (or DBDRIVE_CONNECTION_STRING env)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace navigation and SQL at DEBUG level"),
):
    """
    db-drive - Browse a database as a drive.

    Paths look like db:\\SCHEMA\\TABLE\\OBJECT; '/' is accepted as separator.

    Examples:

        db-drive -p duckdb -c warehouse.duckdb ls

        db-drive ls db:/HR/TABLE --recurse

        db-drive get db:/HR/TABLE/EMPLOYEES
    """
    state["provider"] = provider
    state["connection_string"] = connection_string
    configure_logging(verbose)


if __name__ == "__main__":
    app()
