"""``gitgen init`` — create a ``.gitgen/`` store.

Re-running on an existing store fills in missing pieces and leaves
history, refs and config untouched.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.markup import escape

from gitgen.cli.common import console, reporting_errors, settings_from
from gitgen.core.repository import Repository
from gitgen.models.store import RepoConfig


def init_cmd(
    ctx: typer.Context,
    path: Path = typer.Argument(
        Path("."),
        help="Directory to initialize.",
        file_okay=False,
    ),
) -> None:
    """Initialize a gitgen repository."""
    settings = settings_from(ctx)
    with reporting_errors():
        repository = Repository(path)
        created = repository.init(
            RepoConfig(provider=settings.default_provider, model=settings.default_model)
        )

    where = escape(str(repository.store_dir))
    if created:
        console.print(f"[green]Initialized empty gitgen repository in {where}[/green]")
    else:
        console.print(f"[yellow]Reinitialized existing gitgen repository in {where}[/yellow]")
