"""Validator — static checks on a spec and the files it references."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from gitgen.core.layout import SPEC_SUFFIX
from gitgen.core.resolver import CascadingResolver
from gitgen.errors import GitGenError
from gitgen.models.results import ValidationIssue, ValidationReport

logger = logging.getLogger(__name__)


def _looks_like_path(entry: str) -> bool:
    return "/" in entry or "\\" in entry


class Validator:
    """Checks that a spec resolves and that its inputs and output exist.

    Errors: ``invalid_spec``, ``missing_output``, ``missing_context``,
    ``missing_skill``.  Warnings: ``empty_body``, ``stale_output``.
    Skills that are bare names rather than paths are not checked.
    """

    def __init__(
        self,
        resolver: CascadingResolver | None = None,
        *,
        check_output_exists: bool = True,
        check_context_exists: bool = True,
        check_skills_exist: bool = True,
    ) -> None:
        self.resolver = resolver or CascadingResolver()
        self.check_output_exists = check_output_exists
        self.check_context_exists = check_context_exists
        self.check_skills_exist = check_skills_exist

    def validate(self, spec: Path | str) -> ValidationReport:
        spec_path = Path(os.path.abspath(spec))
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        try:
            config = self.resolver.resolve(spec_path)
        except GitGenError as exc:
            return ValidationReport(
                spec_path=spec_path,
                errors=[ValidationIssue(kind="invalid_spec", message=str(exc))],
            )

        spec_dir = spec_path.parent
        fm = config.frontmatter
        if fm.output:
            output_path: Path | None = Path(os.path.normpath(os.path.join(spec_dir, fm.output)))
        elif spec_path.name.endswith(SPEC_SUFFIX) and spec_path.name != SPEC_SUFFIX:
            output_path = spec_dir / spec_path.name[: -len(SPEC_SUFFIX)]
        else:
            output_path = None

        if self.check_output_exists and output_path is not None and not output_path.exists():
            errors.append(
                ValidationIssue(
                    kind="missing_output",
                    message=f"Output file does not exist: {output_path}",
                )
            )

        if self.check_context_exists:
            for raw, resolved in zip(fm.context or [], config.resolved_context):
                if not resolved.exists():
                    errors.append(
                        ValidationIssue(
                            kind="missing_context",
                            message=f"Context file does not exist: {raw}",
                            details=f"Resolved path: {resolved}",
                        )
                    )

        if self.check_skills_exist:
            for raw, resolved in zip(fm.skills or [], config.resolved_skills):
                if _looks_like_path(str(raw)) and not resolved.exists():
                    errors.append(
                        ValidationIssue(
                            kind="missing_skill",
                            message=f"Skill file does not exist: {raw}",
                            details=f"Resolved path: {resolved}",
                        )
                    )

        if not config.body.strip():
            warnings.append(
                ValidationIssue(kind="empty_body", message="Spec has no body content")
            )

        if (
            output_path is not None
            and output_path.exists()
            and spec_path.stat().st_mtime > output_path.stat().st_mtime
        ):
            warnings.append(
                ValidationIssue(
                    kind="stale_output",
                    message="Spec was modified after the output was generated",
                    details=f"Output: {output_path}",
                )
            )

        logger.debug(
            "Validated %s: %d error(s), %d warning(s)", spec_path, len(errors), len(warnings)
        )
        return ValidationReport(
            spec_path=spec_path, output_path=output_path, errors=errors, warnings=warnings
        )
