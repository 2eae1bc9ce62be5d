"""Spec file parser.

A spec is markdown with a YAML front-matter block delimited by ``---``
lines.  The body may contain one-shot examples::

    ---
    name: API reference
    context: ./src/api.py
    output: API.md
    ---

    Document every public function.

    <example>
    def f(): ...
    ---
    ### f()
    </example>

``context`` and ``skills`` given as scalars are normalized to lists.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from gitgen.errors import SpecParseError
from gitgen.models.spec import OneShotExample, SpecFile, SpecFrontmatter

FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*\r?$\n?",
    re.DOTALL | re.MULTILINE,
)
EXAMPLE_PATTERN = re.compile(r"<example>(.*?)</example>", re.DOTALL)
EXAMPLE_SEPARATOR = "\n---\n"

# Keys written first, in this order, by format_spec.
CANONICAL_KEY_ORDER: tuple[str, ...] = (
    "name",
    "description",
    "context",
    "skills",
    "prompt",
    "output",
)

_PATH_KEYS: tuple[str, ...] = ("context", "skills")


def _split_frontmatter(content: str, path: Path) -> tuple[dict[str, Any], str]:
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return {}, content
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise SpecParseError(path, f"invalid YAML in front-matter: {exc}") from exc
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise SpecParseError(
            path, f"front-matter must be a YAML mapping, got {type(data).__name__}"
        )
    return data, content[match.end():]


def extract_examples(body: str) -> tuple[list[OneShotExample], str]:
    """Pull ``<example>`` blocks out of *body*.

    Returns the examples in document order and the body with the blocks
    removed and surrounding whitespace stripped.
    """
    examples: list[OneShotExample] = []
    for match in EXAMPLE_PATTERN.finditer(body):
        inner = match.group(1).strip()
        if EXAMPLE_SEPARATOR in inner:
            example_input, example_output = inner.split(EXAMPLE_SEPARATOR, 1)
            examples.append(
                OneShotExample(input=example_input.strip(), output=example_output.strip())
            )
        else:
            examples.append(OneShotExample(input=inner, output=""))
    return examples, EXAMPLE_PATTERN.sub("", body).strip()


def _absolutize(base_dir: Path, entry: str) -> str:
    if os.path.isabs(entry):
        return entry
    return os.path.normpath(os.path.join(base_dir, entry))


class SpecParser:
    """Reads spec files into immutable ``SpecFile`` records."""

    def parse(self, path: Path | str) -> SpecFile:
        """Read and parse the spec at *path*.

        Raises
        ------
        SpecParseError
            If the file cannot be read or its front-matter is invalid.
        """
        absolute = Path(os.path.abspath(path))
        try:
            content = absolute.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise SpecParseError(absolute, str(exc)) from exc
        return self.parse_content(content, absolute)

    def parse_content(self, content: str, path: Path | str) -> SpecFile:
        """Parse spec text that claims to live at *path*."""
        absolute = Path(os.path.abspath(path))
        data, body = _split_frontmatter(content, absolute)
        try:
            frontmatter = SpecFrontmatter.from_mapping(data)
        except ValidationError as exc:
            raise SpecParseError(absolute, f"invalid front-matter: {exc}") from exc
        examples, clean_body = extract_examples(body)
        return SpecFile(
            file_path=absolute,
            frontmatter=frontmatter,
            body=clean_body,
            examples=examples,
            raw=content,
        )

    def resolve_relative_paths(
        self, spec: SpecFile, *, include_output: bool = True
    ) -> SpecFile:
        """Return *spec* with context, skills and (optionally) output made absolute.

        Relative entries are resolved against the spec's own directory.
        """
        base_dir = spec.file_path.parent
        data = spec.frontmatter.as_mapping()
        for key in _PATH_KEYS:
            if isinstance(data.get(key), list):
                data[key] = [_absolutize(base_dir, str(p)) for p in data[key]]
        if include_output and data.get("output"):
            data["output"] = _absolutize(base_dir, data["output"])
        return spec.model_copy(update={"frontmatter": SpecFrontmatter.from_mapping(data)})


def _ordered(data: dict[str, Any]) -> dict[str, Any]:
    ordered = {k: data[k] for k in CANONICAL_KEY_ORDER if k in data}
    ordered.update({k: v for k, v in data.items() if k not in ordered})
    return ordered


def _format_example(example: OneShotExample) -> str:
    if not example.output:
        return f"<example>\n{example.input}\n</example>"
    return f"<example>\n{example.input}{EXAMPLE_SEPARATOR}{example.output}\n</example>"


def format_spec(
    frontmatter: SpecFrontmatter | dict[str, Any],
    body: str,
    examples: Iterable[OneShotExample] = (),
) -> str:
    """Serialize front-matter, examples and body back into spec text."""
    data = frontmatter.as_mapping() if isinstance(frontmatter, SpecFrontmatter) else dict(frontmatter)
    data = {k: v for k, v in _ordered(data).items() if v is not None}
    yaml_content = ""
    if data:
        yaml_content = yaml.safe_dump(
            data,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
    parts = [f"---\n{yaml_content}---"]
    blocks = [_format_example(ex) for ex in examples]
    if blocks:
        parts.append("\n\n".join(blocks))
    if body.strip():
        parts.append(body.strip())
    return "\n\n".join(parts) + "\n"
