"""``gitgen commit`` — generate every staged spec.

Each staged spec is resolved, generated, written to its output file,
stored as an object and logged; then the current branch is advanced
and the index cleared.
"""

from __future__ import annotations

import typer

from gitgen.cli.common import console, open_orchestrator, reporting_errors
from gitgen.cli.renderer import GitGenRenderer


def commit_cmd(
    ctx: typer.Context,
    message: str = typer.Option(None, "--message", "-m", help="Commit message."),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Generate without writing outputs, objects or refs."
    ),
    git: bool = typer.Option(False, "--git", help="Include recent git history in predictions."),
    provider: str = typer.Option(None, "--provider", "-p", help="Predictor to use."),
) -> None:
    """Generate staged specs and record the generation."""
    with reporting_errors():
        orchestrator = open_orchestrator(ctx)
        result = orchestrator.commit(
            message, dry_run=dry_run, use_git=git, predictor=provider
        )
    GitGenRenderer(console, orchestrator.repository.root).commit(result)
