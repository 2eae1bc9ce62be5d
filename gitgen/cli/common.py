"""Helpers shared by every CLI command."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from gitgen.config import GitGenSettings
from gitgen.core.orchestrator import Orchestrator
from gitgen.core.repository import open_repository
from gitgen.errors import GitGenError

console = Console()
err_console = Console(stderr=True)


def settings_from(ctx: typer.Context) -> GitGenSettings:
    """Settings loaded by the root callback, or fresh ones outside the app."""
    if isinstance(ctx.obj, GitGenSettings):
        return ctx.obj
    return GitGenSettings()


def open_orchestrator(ctx: typer.Context, start: Path | None = None) -> Orchestrator:
    """Open the repository enclosing *start* (default: cwd) and wrap it."""
    return Orchestrator(open_repository(start), settings=settings_from(ctx))


@contextmanager
def reporting_errors() -> Iterator[None]:
    """Turn ``GitGenError`` into a red message on stderr and exit code 1."""
    try:
        yield
    except GitGenError as exc:
        err_console.print(f"[bold red]error:[/bold red] {escape(str(exc))}")
        raise typer.Exit(code=1) from exc


def relative_to(path: Path, root: Path) -> str:
    """*path* relative to *root* when it lies beneath it, else absolute."""
    try:
        return str(path.relative_to(root))
    except ValueError:
        return str(path)
