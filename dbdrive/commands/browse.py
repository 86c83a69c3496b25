"""Drive browsing commands: ls, names, get, exists, parent."""

from typing import Optional

import typer
from rich.markup import escape

from ..database import TableInfo, ViewInfo
from ..navigation import DriveInfo
from .common import (
    build_navigator,
    columns_table,
    console,
    error_console,
    handle_errors,
    item_table,
    kind_of,
    print_child_items,
    to_json,
)


def ls(
    path: str = typer.Argument("", help="Drive path, e.g. db:\\HR\\TABLE (empty for the drive root)"),
    recurse: bool = typer.Option(False, "--recurse", "-r", help="List the whole subtree"),
    max_result: Optional[int] = typer.Option(None, "--max-result", "-n", help="Rows per table listing (0 = all rows)"),
    as_json: bool = typer.Option(False, "--json", help="Print one JSON object per line"),
):
    """List the children of a path."""
    with handle_errors():
        navigator = build_navigator(max_read_result=max_result)

        def report(branch: str, error: Exception):
            error_console.print(f"[yellow]Skipped {branch}: {escape(str(error))}[/yellow]")

        items = navigator.get_child_items(path, recurse=recurse, on_error=report)
        if as_json:
            for child in items:
                typer.echo(to_json({
                    "path": child.path,
                    "kind": kind_of(child.item),
                    "container": child.is_container,
                    "item": child.item,
                }))
            return

        if print_child_items(items) == 0:
            console.print("[yellow]No items found[/yellow]")


def names(
    path: str = typer.Argument("", help="Drive path (empty for the drive root)"),
):
    """List the names of the direct children of a path."""
    with handle_errors():
        navigator = build_navigator()
        for name in navigator.get_child_names(path):
            typer.echo(name)


def get(
    path: str = typer.Argument(..., help="Drive path of the item"),
    as_json: bool = typer.Option(False, "--json", help="Print the item as JSON"),
):
    """Show the item at a path."""
    with handle_errors():
        navigator = build_navigator()
        item = navigator.get_item(path)

    if as_json:
        typer.echo(to_json(item))
        return

    if item is None:
        console.print("[yellow]Rows are not addressable items[/yellow]")
        return
    if isinstance(item, DriveInfo):
        console.print(f"[bold]{item.root}[/bold] ({item.provider})")
        return
    if not hasattr(item, "to_dict"):
        console.print(kind_of(item) + ": " + str(item.value if hasattr(item, "value") else item))
        return

    console.print(item_table(item, title=f"{kind_of(item)} {item.name}"))
    if isinstance(item, (TableInfo, ViewInfo)) and item.columns:
        console.print(columns_table(item.columns))


def exists(
    path: str = typer.Argument(..., help="Drive path to check"),
):
    """Check whether an item exists (exit status 0 when it does)."""
    with handle_errors():
        navigator = build_navigator()
        found = navigator.item_exists(path)

    typer.echo("true" if found else "false")
    if not found:
        raise typer.Exit(1)


def parent(
    path: str = typer.Argument(..., help="Drive path"),
    root: Optional[str] = typer.Option(None, "--root", help="Do not go above this path"),
):
    """Print the parent path."""
    with handle_errors():
        navigator = build_navigator()
        typer.echo(navigator.get_parent_path(path, root=root))
