"""Pluggable predictors that turn a resolved spec into output content.

Defines the ``Predictor`` Protocol every backend must satisfy, the
explicit ``PredictorRegistry`` that holds them, and the offline
``TemplatePredictor`` used by default.

Registries are constructed, never global: the CLI builds one per
invocation with ``PredictorRegistry.with_builtins()`` and tests build
their own.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from gitgen.core.git_context import format_git_context
from gitgen.core.hasher import sha256_hex
from gitgen.errors import UnknownPredictorError
from gitgen.models.git import GitContext
from gitgen.models.results import PredictedContent
from gitgen.models.spec import ResolvedConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class Predictor(Protocol):
    """Protocol for content generation backends.

    Any object with a ``name`` attribute and a matching ``predict``
    method satisfies this protocol.
    """

    name: str

    def predict(
        self,
        config: ResolvedConfig,
        existing_content: str | None,
        git_context: GitContext | None = None,
    ) -> PredictedContent:
        """Generate output for *config*.

        Parameters
        ----------
        config:
            The cascade-resolved spec.
        existing_content:
            Current contents of the output file, or ``None``.
        git_context:
            Recent history, when the caller asked for it.
        """
        ...


# ---------------------------------------------------------------------------
# Prompt assembly
# ---------------------------------------------------------------------------


def _read_context_files(config: ResolvedConfig) -> list[tuple[str, str]]:
    files: list[tuple[str, str]] = []
    for path in config.resolved_context:
        if not path.is_file():
            logger.debug("Context file %s does not exist, skipping", path)
            continue
        try:
            files.append((str(path), path.read_text(encoding="utf-8")))
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read context file %s: %s", path, exc)
    return files


def build_prompt(
    config: ResolvedConfig,
    existing_content: str | None = None,
    git_context: GitContext | None = None,
) -> str:
    """Assemble the full prompt material for *config* as markdown sections."""
    fm = config.frontmatter
    sections: list[str] = []

    header = [f"{label}: {value}" for label, value in (
        ("Name", fm.name),
        ("Description", fm.description),
        ("Output", fm.output),
    ) if value]
    if header:
        sections.append("## Spec\n\n" + "\n".join(header))

    for path, content in _read_context_files(config):
        sections.append(f"## Context: {path}\n\n```\n{content}\n```")

    if fm.skills:
        sections.append("## Skills\n\n" + "\n".join(f"- {s}" for s in fm.skills))

    if git_context is not None:
        sections.append(format_git_context(git_context))

    if existing_content:
        sections.append(f"## Existing Content\n\n{existing_content}")

    for example in config.examples:
        sections.append(
            f"## Example\n\nInput:\n{example.input}\n\nOutput:\n{example.output}"
        )

    instructions = config.body.strip() or (fm.prompt or "").strip()
    if instructions:
        sections.append(f"## Instructions\n\n{instructions}")
    return "\n\n".join(sections)


def count_tokens(text: str) -> int:
    """Whitespace-delimited word count."""
    return len(text.split())


# ---------------------------------------------------------------------------
# Built-in predictors
# ---------------------------------------------------------------------------


class TemplatePredictor:
    """Offline, deterministic predictor.

    Renders the merged body (or ``prompt`` when the body is empty) as the
    output.  Same resolved spec in, same bytes out.
    """

    name = "template"

    def predict(
        self,
        config: ResolvedConfig,
        existing_content: str | None,
        git_context: GitContext | None = None,
    ) -> PredictedContent:
        rendered = config.body.strip() or (config.frontmatter.prompt or "").strip()
        content = f"{rendered}\n"
        prompt = build_prompt(config, existing_content, git_context)
        return PredictedContent(
            content=content,
            hash=sha256_hex(content),
            model=self.name,
            input_tokens=count_tokens(prompt),
            output_tokens=count_tokens(content),
        )


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------


class PredictorRegistry:
    """Name-keyed collection of predictors with a default.

    The first registered predictor becomes the default until
    :meth:`set_default` says otherwise.

    Examples
    --------
    >>> registry = PredictorRegistry.with_builtins()
    >>> registry.default.name
    'template'
    """

    def __init__(self) -> None:
        self._predictors: dict[str, Predictor] = {}
        self._default: str | None = None

    @classmethod
    def with_builtins(cls) -> PredictorRegistry:
        registry = cls()
        registry.register(TemplatePredictor())
        return registry

    def register(self, predictor: Predictor) -> None:
        if not isinstance(predictor, Predictor):
            raise TypeError(f"{predictor!r} does not implement the Predictor protocol")
        self._predictors[predictor.name] = predictor
        if self._default is None:
            self._default = predictor.name
        logger.debug("Registered predictor %s", predictor.name)

    def get(self, name: str | None = None) -> Predictor:
        """Return the predictor called *name*, or the default when ``None``."""
        key = name or self._default
        if key is None or key not in self._predictors:
            raise UnknownPredictorError(name or "(default)", self.names())
        return self._predictors[key]

    def names(self) -> list[str]:
        return sorted(self._predictors)

    @property
    def default(self) -> Predictor:
        return self.get(None)

    @property
    def default_name(self) -> str | None:
        return self._default

    def set_default(self, name: str) -> None:
        if name not in self._predictors:
            raise UnknownPredictorError(name, self.names())
        self._default = name

    def __contains__(self, name: object) -> bool:
        return name in self._predictors

    def __len__(self) -> int:
        return len(self._predictors)
