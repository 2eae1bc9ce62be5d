"""``gitgen providers`` — list registered predictors."""

from __future__ import annotations

import typer
from rich.table import Table

from gitgen.cli.common import console, settings_from
from gitgen.core.predictor import PredictorRegistry


def providers_cmd(ctx: typer.Context) -> None:
    """List available predictors."""
    settings = settings_from(ctx)
    registry = PredictorRegistry.with_builtins()

    table = Table(title="Predictors")
    table.add_column("Name", style="cyan")
    table.add_column("Default", justify="center")
    for name in registry.names():
        is_default = name == settings.default_provider
        table.add_row(name, "[green]Yes[/green]" if is_default else "")
    console.print(table)
