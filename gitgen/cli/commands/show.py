"""``gitgen show`` — one generation and its stored content."""

from __future__ import annotations

import typer

from gitgen.cli.common import console, open_orchestrator, reporting_errors
from gitgen.cli.renderer import GitGenRenderer


def show_cmd(
    ctx: typer.Context,
    hash_prefix: str = typer.Argument(..., metavar="HASH", help="Generation or content hash prefix."),
) -> None:
    """Show a generation by hash."""
    with reporting_errors():
        orchestrator = open_orchestrator(ctx)
        entry, content = orchestrator.show(hash_prefix)
    GitGenRenderer(console, orchestrator.repository.root).show(entry, content)
