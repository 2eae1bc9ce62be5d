"""``gitgen config`` — read and write ``.gitgen/config``.

Keys are dot paths into the JSON document, e.g. ``provider`` or
``providers.template.style``.  ``set`` parses its value as JSON when it
can, so ``true``, ``3`` and ``{"a": 1}`` keep their types.
"""

from __future__ import annotations

import json

import typer
from rich.markup import escape

from gitgen.cli.common import console, err_console, open_orchestrator, reporting_errors

config_app = typer.Typer(
    name="config",
    help="Get and set repository options.",
    no_args_is_help=True,
    add_completion=False,
)


def _format(value: object) -> str:
    return value if isinstance(value, str) else json.dumps(value)


def _flatten(data: dict, prefix: str = "") -> list[tuple[str, object]]:
    items: list[tuple[str, object]] = []
    for key, value in data.items():
        path = f"{prefix}{key}"
        if isinstance(value, dict) and value:
            items.extend(_flatten(value, f"{path}."))
        else:
            items.append((path, value))
    return items


@config_app.command(name="get", help="Print the value of a key.")
def config_get_cmd(ctx: typer.Context, key: str = typer.Argument(...)) -> None:
    with reporting_errors():
        value = open_orchestrator(ctx).repository.get_config_value(key)
    if value is None:
        err_console.print(f"[yellow]{escape(key)} is not set[/yellow]")
        raise typer.Exit(code=1)
    console.print(escape(_format(value)), highlight=False)


@config_app.command(name="set", help="Set a key.  VALUE is parsed as JSON when possible.")
def config_set_cmd(
    ctx: typer.Context,
    key: str = typer.Argument(...),
    value: str = typer.Argument(...),
) -> None:
    with reporting_errors():
        stored = open_orchestrator(ctx).repository.set_config_value(key, value)
    console.print(f"{escape(key)} = {escape(_format(stored))}", highlight=False)


@config_app.command(name="unset", help="Remove a key.")
def config_unset_cmd(ctx: typer.Context, key: str = typer.Argument(...)) -> None:
    with reporting_errors():
        removed = open_orchestrator(ctx).repository.unset_config_value(key)
    if not removed:
        err_console.print(f"[yellow]{escape(key)} is not set[/yellow]")
        raise typer.Exit(code=1)
    console.print(f"Unset {escape(key)}")


@config_app.command(name="list", help="Print every key and value.")
def config_list_cmd(ctx: typer.Context) -> None:
    with reporting_errors():
        data = open_orchestrator(ctx).repository.config_items()
    for key, value in _flatten(data):
        console.print(f"{escape(key)}={escape(_format(value))}", highlight=False)
