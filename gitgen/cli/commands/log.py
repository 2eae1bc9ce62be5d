"""``gitgen log`` — generation history, most recent first."""

from __future__ import annotations

from pathlib import Path

import typer

from gitgen.cli.common import console, open_orchestrator, reporting_errors
from gitgen.cli.renderer import GitGenRenderer


def log_cmd(
    ctx: typer.Context,
    spec: Path = typer.Argument(None, help="Only show generations of this spec."),
    limit: int = typer.Option(None, "--limit", "-n", min=1, help="Maximum entries to show."),
) -> None:
    """Show generation history."""
    with reporting_errors():
        orchestrator = open_orchestrator(ctx)
        entries = orchestrator.log(spec, limit)
    GitGenRenderer(console, orchestrator.repository.root).log(entries)
