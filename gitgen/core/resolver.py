"""Cascading resolver — merges directory-level specs down onto a leaf spec.

Starting at the leaf's directory, the resolver walks toward the
filesystem root collecting ``.gitgen.md`` fragments, then folds them
root-to-leaf with the leaf spec last.

Design:
- Broken ancestors are logged and skipped; a broken leaf is fatal.
- The walk stops at ``stop_at``, at the filesystem root, or after
  ``max_depth`` directories, whichever comes first.
- Visited directories are tracked by real path, so a symlink that loops
  back onto an ancestor raises ``CircularReferenceError``.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from gitgen.config import GitGenSettings
from gitgen.core.layout import DIRECTORY_SPEC_NAME, is_directory_spec
from gitgen.core.merge import (
    ArrayMergeStrategy,
    BodyMergeStrategy,
    merge_body,
    merge_examples,
    merge_frontmatter,
)
from gitgen.core.parser import SpecParser
from gitgen.errors import CircularReferenceError, EmptyChainError, SpecParseError
from gitgen.models.spec import OneShotExample, ResolvedConfig, SpecFile, SpecFrontmatter

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10


def _absolute_entries(base_dir: Path, entries: list[str] | None) -> list[Path]:
    if not entries:
        return []
    return [Path(os.path.normpath(os.path.join(base_dir, str(e)))) for e in entries]


class CascadingResolver:
    """Resolve a leaf spec into a single ``ResolvedConfig``.

    Parameters
    ----------
    max_depth:
        Maximum number of directories examined, the leaf's own included.
    stop_at:
        Directory above which the walk never goes.  ``None`` means the
        filesystem root.
    context_merge, skills_merge:
        Array strategies for ``context`` and ``skills``.  Every other
        array-valued key concatenates.
    body_merge:
        How bodies combine down the chain.
    """

    def __init__(
        self,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        stop_at: Path | str | None = None,
        context_merge: ArrayMergeStrategy = ArrayMergeStrategy.DEDUPE,
        skills_merge: ArrayMergeStrategy = ArrayMergeStrategy.DEDUPE,
        body_merge: BodyMergeStrategy = BodyMergeStrategy.APPEND,
        parser: SpecParser | None = None,
    ) -> None:
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self.max_depth = max_depth
        self.stop_at = Path(os.path.abspath(stop_at)) if stop_at is not None else None
        self.body_merge = BodyMergeStrategy(body_merge)
        self.array_strategies: dict[str, ArrayMergeStrategy] = {
            "context": ArrayMergeStrategy(context_merge),
            "skills": ArrayMergeStrategy(skills_merge),
        }
        self.parser = parser or SpecParser()

    @classmethod
    def from_settings(
        cls,
        settings: GitGenSettings,
        *,
        stop_at: Path | str | None = None,
    ) -> CascadingResolver:
        return cls(
            max_depth=settings.max_depth,
            stop_at=stop_at,
            context_merge=settings.context_merge,
            skills_merge=settings.skills_merge,
            body_merge=settings.body_merge,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def resolve(self, leaf_spec_path: Path | str) -> ResolvedConfig:
        """Resolve the cascade for *leaf_spec_path*.

        Raises
        ------
        SpecParseError
            If the leaf spec cannot be parsed.
        CircularReferenceError
            If the ancestor walk revisits a directory.
        EmptyChainError
            If no spec could be parsed at all.
        """
        leaf = Path(os.path.abspath(leaf_spec_path))
        paths = self.collect_chain_paths(leaf)
        chain = self._parse_chain(paths, leaf)
        return self._merge_chain(chain)

    def collect_chain_paths(self, leaf: Path) -> list[Path]:
        """Return the spec paths contributing to *leaf*, root to leaf."""
        leaf = Path(os.path.abspath(leaf))
        paths: list[Path] = []
        visited: set[Path] = set()
        current = leaf.parent

        for _ in range(self.max_depth):
            real = current.resolve()
            if real in visited:
                raise CircularReferenceError(current)
            visited.add(real)

            candidate = current / DIRECTORY_SPEC_NAME
            if candidate.is_file():
                paths.insert(0, candidate)

            parent = current.parent
            if current == self.stop_at or parent == current:
                break
            current = parent

        if not is_directory_spec(leaf):
            paths.append(leaf)
        return paths

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _parse_chain(self, paths: list[Path], leaf: Path) -> list[SpecFile]:
        chain: list[SpecFile] = []
        for path in paths:
            try:
                chain.append(self.parser.parse(path))
            except SpecParseError as exc:
                if path == leaf:
                    raise
                logger.warning("Skipping unparsable ancestor spec %s: %s", path, exc.reason)
        return chain

    def _merge_chain(self, chain: list[SpecFile]) -> ResolvedConfig:
        if not chain:
            raise EmptyChainError("No spec files found in cascade chain")

        merged: dict = {}
        merged_body = ""
        merged_examples: list[OneShotExample] = []
        for spec in chain:
            merged = merge_frontmatter(
                merged, spec.frontmatter.as_mapping(), self.array_strategies
            )
            merged_body = merge_body(merged_body, spec.body, self.body_merge)
            merged_examples = merge_examples(merged_examples, spec.examples)

        frontmatter = SpecFrontmatter.from_mapping(merged)
        leaf_dir = chain[-1].file_path.parent
        return ResolvedConfig(
            chain=chain,
            frontmatter=frontmatter,
            body=merged_body,
            examples=merged_examples,
            resolved_context=_absolute_entries(leaf_dir, frontmatter.context),
            resolved_skills=_absolute_entries(leaf_dir, frontmatter.skills),
        )
