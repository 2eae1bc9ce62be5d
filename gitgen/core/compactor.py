"""Compactor — merges an explicit, user-ordered list of specs into one.

Unlike the cascade, nothing is discovered: the caller names the files and
their order.  Each file's relative ``context`` and ``skills`` entries are
first made absolute against that file's directory, so fragments from
different folders merge without ambiguity.  ``output`` is copied as
written.  Unless ``resolve_paths`` is set the merged entries are
converted back, relative to ``base_path``.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Sequence
from pathlib import Path

from gitgen.core.merge import (
    ArrayMergeStrategy,
    BodyMergeStrategy,
    deduplicate,
    merge_body,
    merge_examples,
    merge_frontmatter,
)
from gitgen.core.parser import SpecParser, format_spec
from gitgen.errors import EmptyChainError
from gitgen.models.spec import MergedSpec, OneShotExample, SpecFrontmatter

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT = "merged.gitgen.md"

_PATH_KEYS = ("context", "skills")


def to_relative_path(absolute: str, base_path: Path) -> str:
    """Express *absolute* relative to *base_path*, always with a leading dot."""
    relative = os.path.relpath(absolute, base_path)
    if relative.startswith(".") or os.path.isabs(relative):
        return relative
    return f"./{relative}"


class Compactor:
    def __init__(
        self,
        *,
        array_merge: ArrayMergeStrategy = ArrayMergeStrategy.DEDUPE,
        body_merge: BodyMergeStrategy = BodyMergeStrategy.APPEND,
        output: str = DEFAULT_OUTPUT,
        resolve_paths: bool = False,
        base_path: Path | str | None = None,
        parser: SpecParser | None = None,
    ) -> None:
        self.array_merge = ArrayMergeStrategy(array_merge)
        self.body_merge = BodyMergeStrategy(body_merge)
        self.output = output
        self.resolve_paths = resolve_paths
        self.base_path = Path(os.path.abspath(base_path or os.getcwd()))
        self.parser = parser or SpecParser()

    def compact(self, input_paths: Sequence[Path | str]) -> MergedSpec:
        """Merge *input_paths* in the given order.

        Raises
        ------
        EmptyChainError
            If *input_paths* is empty.
        SpecParseError
            If any input cannot be parsed.
        """
        if not input_paths:
            raise EmptyChainError("No input files provided")

        specs = [
            self.parser.resolve_relative_paths(self.parser.parse(p), include_output=False)
            for p in input_paths
        ]
        logger.debug("Compacting %d spec(s) into %s", len(specs), self.output)

        merged: dict = {}
        body = ""
        examples: list[OneShotExample] = []
        for spec in specs:
            merged = merge_frontmatter(
                merged, spec.frontmatter.as_mapping(), default=self.array_merge
            )
            body = merge_body(body, spec.body, self.body_merge)
            examples = merge_examples(examples, spec.examples)

        for key in _PATH_KEYS:
            entries = merged.get(key)
            if not isinstance(entries, list):
                continue
            entries = deduplicate(entries)
            if not self.resolve_paths:
                entries = [to_relative_path(str(e), self.base_path) for e in entries]
            merged[key] = entries

        return MergedSpec(
            file_path=self.base_path / self.output,
            frontmatter=SpecFrontmatter.from_mapping(merged),
            body=body,
            examples=examples,
            sources=[spec.file_path for spec in specs],
        )

    @staticmethod
    def serialize(merged: MergedSpec) -> str:
        return format_spec(merged.frontmatter, merged.body, merged.examples)
