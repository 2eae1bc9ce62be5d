"""``gitgen reset`` — restore an output from a previous generation."""

from __future__ import annotations

import typer

from gitgen.cli.common import console, open_orchestrator, reporting_errors
from gitgen.cli.renderer import GitGenRenderer


def reset_cmd(
    ctx: typer.Context,
    hash_prefix: str = typer.Argument(..., metavar="HASH", help="Generation or content hash prefix."),
    hard: bool = typer.Option(False, "--hard", help="Write the stored content to the output file."),
) -> None:
    """Reset an output file to a previous generation."""
    with reporting_errors():
        orchestrator = open_orchestrator(ctx)
        result = orchestrator.reset(hash_prefix, hard=hard)
    GitGenRenderer(console, orchestrator.repository.root).reset(result)
