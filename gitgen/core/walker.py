"""Recursive file discovery with a pluggable ignore predicate."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

IGNORED_DIRECTORY_NAMES: frozenset[str] = frozenset(
    {".gitgen", ".git", ".hg", ".svn", "node_modules", "__pycache__", ".venv", "venv"}
)


def default_ignore(path: Path) -> bool:
    """Skip the store directory, VCS metadata and dependency folders."""
    return path.name in IGNORED_DIRECTORY_NAMES


def _log_walk_error(error: OSError) -> None:
    logger.debug("Skipping unreadable directory %s: %s", error.filename, error)


def walk_files(
    root: Path,
    match: Callable[[Path], bool],
    ignore: Callable[[Path], bool] = default_ignore,
) -> Iterator[Path]:
    """Yield files under *root* for which *match* is true.

    Directories for which *ignore* is true are pruned and never entered.
    Output is sorted within each directory so results are stable.
    """
    for dirpath, dirnames, filenames in os.walk(root, onerror=_log_walk_error):
        current = Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if not ignore(current / d))
        for name in sorted(filenames):
            candidate = current / name
            if match(candidate):
                yield candidate
