"""Shared test fixtures for gitgen."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

from gitgen.config import GitGenSettings
from gitgen.core.object_store import ContentAddressedStore
from gitgen.core.orchestrator import Orchestrator
from gitgen.core.repository import Repository
from gitgen.core.resolver import CascadingResolver


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Strip GITGEN_* variables and undo CLI logging setup after each test."""
    for name in list(os.environ):
        if name.startswith("GITGEN_"):
            monkeypatch.delenv(name)
    yield
    logger = logging.getLogger("gitgen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test files."""
    return tmp_path


@pytest.fixture
def write_file(tmp_dir: Path) -> Callable[[str, str], Path]:
    """Factory fixture: write *text* to a path relative to ``tmp_dir``."""

    def _write(relative: str, text: str) -> Path:
        path = tmp_dir / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def settings() -> GitGenSettings:
    """Provide default settings, ignoring any .env file."""
    return GitGenSettings(_env_file=None)


@pytest.fixture
def resolver(tmp_dir: Path) -> CascadingResolver:
    """Provide a resolver that never walks above ``tmp_dir``."""
    return CascadingResolver(stop_at=tmp_dir)


@pytest.fixture
def object_store(tmp_dir: Path) -> ContentAddressedStore:
    """Provide a fresh ContentAddressedStore in a temp directory."""
    return ContentAddressedStore(tmp_dir / "objects")


@pytest.fixture
def repo(tmp_dir: Path) -> Repository:
    """Provide an initialized repository rooted at ``tmp_dir``."""
    repository = Repository(tmp_dir)
    repository.init()
    return repository


@pytest.fixture
def orchestrator(
    repo: Repository, resolver: CascadingResolver, settings: GitGenSettings
) -> Orchestrator:
    """Provide an Orchestrator over ``repo`` with built-in predictors."""
    return Orchestrator(repo, resolver=resolver, settings=settings)
