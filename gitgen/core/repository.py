"""The ``.gitgen/`` repository — HEAD, config, index, refs, objects and log.

Only the repository root holds a store; discovery searches upward from
any working directory the way git does.

Design:
- The generation log is append-only JSONL; nothing rewrites or deletes lines.
- The staging index holds at most one entry per spec path.
- Objects are immutable; see ``gitgen.core.object_store``.
- There is no locking.  Concurrent invocations against one store may
  interleave index writes.
"""

from __future__ import annotations

import json
import logging
import os
import stat as stat_module
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from gitgen.core.hasher import compute_commit_hash
from gitgen.core.layout import (
    CONFIG_FILE,
    GENERATIONS_LOG,
    HEAD_FILE,
    HEAD_REF_PREFIX,
    INDEX_FILE,
    LOGS_DIR,
    OBJECTS_DIR,
    REFS_HEADS_DIR,
    STASH_DIR,
    STORE_DIR_NAME,
    is_spec_file,
)
from gitgen.core.object_store import ContentAddressedStore
from gitgen.core.walker import default_ignore, walk_files
from gitgen.errors import GenerationLogError, NotARepositoryError, RepositoryStateError
from gitgen.models.store import (
    DEFAULT_BRANCH,
    LogEntry,
    RepoConfig,
    StagedSpec,
    StagingIndexState,
)

logger = logging.getLogger(__name__)


def _absolute(path: Path | str) -> Path:
    return Path(os.path.abspath(path))


# ---------------------------------------------------------------------------
# Discovery
# ---------------------------------------------------------------------------


def find_repository_root(start: Path | str) -> Path | None:
    """Search from *start* toward the filesystem root for a ``.gitgen/`` directory.

    Returns the directory containing ``.gitgen/``, or ``None``.
    """
    current = _absolute(start)
    while True:
        candidate = current / STORE_DIR_NAME
        try:
            st = candidate.stat()
        except (FileNotFoundError, NotADirectoryError):
            pass
        else:
            if stat_module.S_ISDIR(st.st_mode):
                return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


def open_repository(start: Path | str | None = None) -> Repository:
    """Return the repository enclosing *start* (default: the working directory).

    Raises
    ------
    NotARepositoryError
        If no ``.gitgen/`` directory exists at or above *start*.
    """
    origin = _absolute(start or os.getcwd())
    root = find_repository_root(origin)
    if root is None:
        raise NotARepositoryError(origin)
    return Repository(root)


# ---------------------------------------------------------------------------
# Index
# ---------------------------------------------------------------------------


class StagingIndex:
    """Specs staged for the next commit, persisted as ``.gitgen/index``."""

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> StagingIndexState:
        if not self._path.is_file():
            return StagingIndexState()
        try:
            return StagingIndexState.model_validate_json(self._path.read_text(encoding="utf-8"))
        except ValidationError as exc:
            raise RepositoryStateError(self._path, str(exc)) from exc

    def save(self, state: StagingIndexState) -> None:
        self._path.write_text(state.model_dump_json(indent=2), encoding="utf-8")

    def stage(
        self,
        spec_path: Path | str,
        spec_hash: str,
        output_path: Path | str,
        predicted_hash: str | None = None,
    ) -> StagedSpec:
        """Stage *spec_path*, replacing any existing entry for it."""
        entry = StagedSpec(
            spec_path=_absolute(spec_path),
            spec_hash=spec_hash,
            output_path=_absolute(output_path),
            predicted_hash=predicted_hash,
        )
        state = self.load()
        staged = [s for s in state.staged if s.spec_path != entry.spec_path]
        staged.append(entry)
        self.save(state.model_copy(update={"staged": staged}))
        logger.debug("Staged %s -> %s", entry.spec_path, entry.output_path)
        return entry

    def unstage(self, spec_path: Path | str) -> bool:
        """Remove *spec_path* from the index.  Returns whether it was staged."""
        target = _absolute(spec_path)
        state = self.load()
        remaining = [s for s in state.staged if s.spec_path != target]
        if len(remaining) == len(state.staged):
            return False
        self.save(state.model_copy(update={"staged": remaining}))
        return True

    def staged(self) -> list[StagedSpec]:
        return list(self.load().staged)

    def is_staged(self, spec_path: Path | str) -> bool:
        target = _absolute(spec_path)
        return any(s.spec_path == target for s in self.staged())

    def clear(self) -> None:
        state = self.load()
        self.save(state.model_copy(update={"staged": []}))

    def record_commit(self, commit_hash: str) -> None:
        """Clear the staged entries and remember *commit_hash* in one write."""
        self.save(StagingIndexState(staged=[], last_commit=commit_hash))

    @property
    def last_commit(self) -> str | None:
        return self.load().last_commit


# ---------------------------------------------------------------------------
# Generation log
# ---------------------------------------------------------------------------


class GenerationLog:
    """Append-only JSONL history of generations.

    This is the ONLY write path for history.  There is no update or delete.
    """

    def __init__(self, path: Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def append(self, entry: LogEntry) -> LogEntry:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as fh:
            fh.write(entry.model_dump_json() + "\n")
        return entry

    def entries(self) -> list[LogEntry]:
        """All entries in file order (oldest first)."""
        if not self._path.is_file():
            return []
        result: list[LogEntry] = []
        with self._path.open(encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, start=1):
                if not line.strip():
                    continue
                try:
                    result.append(LogEntry.model_validate_json(line))
                except ValidationError as exc:
                    raise GenerationLogError(
                        f"{self._path}:{lineno}: malformed log entry: {exc}"
                    ) from exc
        return result

    def read(self, spec_path: Path | str | None = None, limit: int = 10) -> list[LogEntry]:
        """Most recent entries first, optionally only those for *spec_path*."""
        entries = self.entries()
        if spec_path is not None:
            target = _absolute(spec_path)
            entries = [e for e in entries if e.spec_path == target]
        entries.reverse()
        return entries[:limit]


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class Repository:
    """Handle on the ``.gitgen/`` store beneath *root*.

    Constructing a ``Repository`` touches nothing on disk; call
    :meth:`init` to create the store.
    """

    def __init__(self, root: Path | str) -> None:
        self.root = _absolute(root)
        self.store_dir = self.root / STORE_DIR_NAME
        self.objects = ContentAddressedStore(self.store_dir / OBJECTS_DIR)
        self.index = StagingIndex(self.store_dir / INDEX_FILE)
        self.log = GenerationLog(self.store_dir / LOGS_DIR / GENERATIONS_LOG)

    def __repr__(self) -> str:
        return f"Repository({str(self.root)!r})"

    @property
    def head_path(self) -> Path:
        return self.store_dir / HEAD_FILE

    @property
    def config_path(self) -> Path:
        return self.store_dir / CONFIG_FILE

    @property
    def refs_dir(self) -> Path:
        return self.store_dir / REFS_HEADS_DIR

    def is_initialized(self) -> bool:
        return self.store_dir.is_dir()

    # ------------------------------------------------------------------
    # Init
    # ------------------------------------------------------------------

    def init(self, config: RepoConfig | None = None) -> bool:
        """Create the store layout.

        Returns ``True`` when the store was newly created.  Re-running on
        an existing store only fills in missing pieces and never
        overwrites HEAD, config, index, refs or history.
        """
        created = not self.is_initialized()
        for directory in (
            self.store_dir / OBJECTS_DIR,
            self.refs_dir,
            self.store_dir / LOGS_DIR,
            self.store_dir / STASH_DIR,
        ):
            directory.mkdir(parents=True, exist_ok=True)

        config = config or RepoConfig()
        if not self.head_path.exists():
            self.set_head(config.default_branch)
        if not self.config_path.exists():
            self._write_raw_config(config.model_dump(mode="json", exclude_none=True))
        if not self.index.path.exists():
            self.index.save(StagingIndexState())
        branch_ref = self.refs_dir / self.current_branch()
        if not branch_ref.exists():
            branch_ref.write_text("", encoding="utf-8")

        logger.info(
            "%s gitgen repository in %s",
            "Initialized" if created else "Reinitialized",
            self.store_dir,
        )
        return created

    # ------------------------------------------------------------------
    # HEAD
    # ------------------------------------------------------------------

    def current_branch(self) -> str:
        """Branch named by HEAD; the default branch if HEAD is missing or malformed."""
        try:
            content = self.head_path.read_text(encoding="utf-8").strip()
        except FileNotFoundError:
            return DEFAULT_BRANCH
        if not content.startswith(HEAD_REF_PREFIX):
            logger.warning("Malformed HEAD %r, assuming %s", content, DEFAULT_BRANCH)
            return DEFAULT_BRANCH
        return content[len(HEAD_REF_PREFIX):].strip() or DEFAULT_BRANCH

    def set_head(self, branch: str) -> None:
        self.head_path.write_text(f"{HEAD_REF_PREFIX}{branch}\n", encoding="utf-8")

    # ------------------------------------------------------------------
    # Config
    # ------------------------------------------------------------------

    def _read_raw_config(self) -> dict[str, Any]:
        if not self.config_path.is_file():
            return {}
        try:
            data = json.loads(self.config_path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise RepositoryStateError(self.config_path, str(exc)) from exc
        if not isinstance(data, dict):
            raise RepositoryStateError(self.config_path, "config must be a JSON object")
        return data

    def _write_raw_config(self, data: dict[str, Any]) -> None:
        self.config_path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")

    def read_config(self) -> RepoConfig:
        try:
            return RepoConfig.model_validate(self._read_raw_config())
        except ValidationError as exc:
            raise RepositoryStateError(self.config_path, str(exc)) from exc

    def config_items(self) -> dict[str, Any]:
        """The raw config document, unvalidated."""
        return self._read_raw_config()

    def get_config_value(self, key: str) -> Any:
        """Look up a dot-separated *key*; ``None`` when any segment is missing."""
        node: Any = self._read_raw_config()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
        return node

    def set_config_value(self, key: str, raw: str) -> Any:
        """Set a dot-separated *key*.

        *raw* is parsed as JSON so numbers, booleans and objects keep their
        type; anything that is not valid JSON is stored as a string.
        Intermediate tables are created as needed.
        """
        try:
            value: Any = json.loads(raw)
        except json.JSONDecodeError:
            value = raw

        data = self._read_raw_config()
        *parents, leaf = key.split(".")
        node = data
        for part in parents:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[leaf] = value
        self._write_raw_config(data)
        return value

    def unset_config_value(self, key: str) -> bool:
        """Remove a dot-separated *key*.  Returns whether anything was removed."""
        data = self._read_raw_config()
        *parents, leaf = key.split(".")
        node: Any = data
        for part in parents:
            node = node.get(part) if isinstance(node, dict) else None
        if not isinstance(node, dict) or leaf not in node:
            return False
        del node[leaf]
        self._write_raw_config(data)
        return True

    # ------------------------------------------------------------------
    # Objects
    # ------------------------------------------------------------------

    def write_object(self, content: str) -> str:
        return self.objects.write(content)

    def read_object(self, object_hash: str) -> str:
        return self.objects.read(object_hash)

    def object_exists(self, object_hash: str) -> bool:
        return self.objects.exists(object_hash)

    # ------------------------------------------------------------------
    # Refs and commits
    # ------------------------------------------------------------------

    def update_branch_ref(self, branch: str, commit_hash: str) -> None:
        ref = self.refs_dir / branch
        ref.parent.mkdir(parents=True, exist_ok=True)
        ref.write_text(commit_hash, encoding="utf-8")

    def get_branch_ref(self, branch: str) -> str | None:
        ref = self.refs_dir / branch
        if not ref.is_file():
            return None
        return ref.read_text(encoding="utf-8").strip() or None

    def create_commit_hash(
        self,
        message: str,
        entries: list[dict[str, Any]],
        timestamp: datetime | None = None,
    ) -> str:
        return compute_commit_hash(message, entries, timestamp)

    # ------------------------------------------------------------------
    # Specs
    # ------------------------------------------------------------------

    def find_all_specs(
        self, ignore: Callable[[Path], bool] = default_ignore
    ) -> list[Path]:
        """Every ``*.gitgen.md`` under the root, directory specs included."""
        return list(walk_files(self.root, is_spec_file, ignore))
