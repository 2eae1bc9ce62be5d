"""Spec file models — parsed fragments, resolved cascades and compacted specs."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

RESERVED_KEYS: tuple[str, ...] = (
    "name",
    "description",
    "context",
    "skills",
    "output",
    "prompt",
)


def _scalar_text(value: Any) -> Any:
    """YAML numbers, booleans and dates as the text a spec author wrote."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, (int, float)):
        return str(value)
    return value


class OneShotExample(BaseModel):
    """An ``<example>`` block: an input and its expected output."""

    model_config = ConfigDict(frozen=True)

    input: str
    output: str = ""


class SpecFrontmatter(BaseModel):
    """Front-matter of a spec file.

    The reserved keys are typed fields; anything else lands in
    ``extensions`` in file order.  Only keys that were actually present
    take part in a merge, so ``model_fields_set`` is significant: an
    explicit ``null`` is present, an omitted key is not.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = None
    description: str | None = None
    context: list[str] | None = None
    skills: list[str] | None = None
    output: str | None = None
    prompt: str | None = None
    extensions: dict[str, Any] = Field(default_factory=dict)

    @field_validator("name", "description", "output", "prompt", mode="before")
    @classmethod
    def _stringify(cls, v: Any) -> Any:
        return _scalar_text(v)

    @field_validator("context", "skills", mode="before")
    @classmethod
    def _listify(cls, v: Any) -> Any:
        if v is None:
            return v
        if not isinstance(v, list):
            v = [v]
        return [_scalar_text(item) for item in v]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SpecFrontmatter:
        """Split a raw front-matter mapping into reserved fields and extensions."""
        reserved = {k: v for k, v in data.items() if k in RESERVED_KEYS}
        extensions = {k: v for k, v in data.items() if k not in RESERVED_KEYS}
        return cls(**reserved, extensions=extensions)

    def as_mapping(self) -> dict[str, Any]:
        """Return the present keys, reserved ones first, then extensions."""
        present = self.model_fields_set
        data: dict[str, Any] = {
            key: getattr(self, key) for key in RESERVED_KEYS if key in present
        }
        data.update(self.extensions)
        return data

    def get(self, key: str, default: Any = None) -> Any:
        return self.as_mapping().get(key, default)


class SpecFile(BaseModel):
    """One parsed spec fragment.  Immutable once parsed."""

    model_config = ConfigDict(frozen=True)

    file_path: Path
    frontmatter: SpecFrontmatter = Field(default_factory=SpecFrontmatter)
    body: str = ""
    examples: list[OneShotExample] = Field(default_factory=list)
    raw: str = ""


class ResolvedConfig(BaseModel):
    """The merged view of a cascade chain, root to leaf.

    Recomputed on every resolve; never cached.
    """

    model_config = ConfigDict(frozen=True)

    chain: list[SpecFile]
    frontmatter: SpecFrontmatter
    body: str
    examples: list[OneShotExample]
    resolved_context: list[Path] = Field(default_factory=list)
    resolved_skills: list[Path] = Field(default_factory=list)

    @property
    def leaf(self) -> SpecFile:
        return self.chain[-1]

    @property
    def file_path(self) -> Path:
        return self.leaf.file_path


class MergedSpec(BaseModel):
    """Result of compacting an explicit list of spec files."""

    model_config = ConfigDict(frozen=True)

    file_path: Path
    frontmatter: SpecFrontmatter
    body: str
    examples: list[OneShotExample]
    sources: list[Path] = Field(default_factory=list)
