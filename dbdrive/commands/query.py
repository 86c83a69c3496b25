"""Ad-hoc parameterized query command."""

from typing import Any, Dict, List, Optional

import typer
from typing_extensions import Annotated

from ..config import settings
from .common import build_driver, console, handle_errors, rows_table, to_json


def parse_value(text: str) -> Any:
    """Parse a --param value into int, float, bool or None, else keep the string."""
    lowered = text.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    if lowered == "null":
        return None
    for cast in (int, float):
        try:
            return cast(text)
        except ValueError:
            continue
    return text


def parse_params(values: Optional[List[str]]) -> Dict[str, Any]:
    params = {}
    for value in values or []:
        name, sep, raw = value.partition("=")
        if not sep or not name.strip():
            raise typer.BadParameter(f"expected name=value, got {value!r}", param_hint="--param")
        params[name.strip()] = parse_value(raw)
    return params


def query(
    sql: str = typer.Argument(..., help="SQL statement using the backend's named placeholders"),
    param: Annotated[Optional[List[str]], typer.Option(
        "--param", "-P",
        help="Named parameter as name=value (can be repeated)",
    )] = None,
    max_result: int = typer.Option(0, "--max-result", "-n", help="Stop after N rows (0 = all rows)"),
    timeout: Optional[int] = typer.Option(None, "--timeout", "-t", help="Seconds allowed for the statement"),
    as_json: bool = typer.Option(False, "--json", help="Print one JSON object per row"),
):
    """Run a SQL statement and stream its rows.

    Examples:

        db-drive -p oracle query "SELECT * FROM ALL_USERS WHERE USERNAME = :name" -P name=HR

        db-drive -p postgres query "SELECT * FROM pg_tables WHERE schemaname = %(s)s" -P s=public
    """
    params = parse_params(param)
    with handle_errors():
        driver = build_driver()
        rows = driver.executor.execute(
            sql,
            params,
            timeout=timeout if timeout is not None else settings.timeout,
            max_result=max_result,
        )
        if as_json:
            for row in rows:
                typer.echo(to_json(row))
            return

        table = rows_table(rows)
        if table is None:
            console.print("[yellow]No rows returned[/yellow]")
        else:
            console.print(table)
