"""Tests for Validator."""

from __future__ import annotations

import os
from pathlib import Path

from gitgen.core.validator import Validator


def _kinds(issues) -> list[str]:
    return [i.kind for i in issues]


class TestValidator:
    def test_clean_spec_passes(self, resolver, write_file, tmp_dir: Path):
        write_file("src/api.py", "x = 1\n")
        write_file("API.md", "# API\n")
        spec = write_file(
            "api.gitgen.md", "---\ncontext: ./src/api.py\noutput: API.md\n---\nDocument it.\n"
        )
        os.utime(spec, (0, 0))
        report = Validator(resolver).validate(spec)
        assert report.passed
        assert report.warnings == []
        assert report.output_path == tmp_dir / "API.md"

    def test_missing_output_and_context(self, resolver, write_file):
        spec = write_file(
            "api.gitgen.md", "---\ncontext: [./nope.py]\noutput: API.md\n---\nBody\n"
        )
        report = Validator(resolver).validate(spec)
        assert not report.passed
        assert _kinds(report.errors) == ["missing_output", "missing_context"]
        assert report.errors[1].details.endswith("nope.py")

    def test_output_check_can_be_disabled(self, resolver, write_file):
        spec = write_file("a.gitgen.md", "---\noutput: a.txt\n---\nBody\n")
        assert Validator(resolver, check_output_exists=False).validate(spec).passed

    def test_output_inferred_from_spec_name(self, resolver, write_file, tmp_dir: Path):
        spec = write_file("notes.txt.gitgen.md", "Body only\n")
        report = Validator(resolver).validate(spec)
        assert report.output_path == tmp_dir / "notes.txt"
        assert _kinds(report.errors) == ["missing_output"]

    def test_bare_skill_names_are_not_checked(self, resolver, write_file):
        spec = write_file(
            "a.gitgen.md", "---\nskills: [python, ./skills/missing.md]\n---\nBody\n"
        )
        report = Validator(resolver, check_output_exists=False).validate(spec)
        assert _kinds(report.errors) == ["missing_skill"]
        assert "missing.md" in report.errors[0].message

    def test_empty_body_warns(self, resolver, write_file):
        spec = write_file("a.gitgen.md", "---\nname: a\n---\n")
        report = Validator(resolver, check_output_exists=False).validate(spec)
        assert report.passed
        assert _kinds(report.warnings) == ["empty_body"]

    def test_stale_output_warns(self, resolver, write_file, tmp_dir: Path):
        out = write_file("a.txt", "old")
        spec = write_file("a.gitgen.md", "---\noutput: a.txt\n---\nBody\n")
        os.utime(out, (0, 0))
        report = Validator(resolver).validate(spec)
        assert _kinds(report.warnings) == ["stale_output"]

    def test_invalid_spec(self, resolver, write_file):
        spec = write_file("a.gitgen.md", "---\n- just\n- a list\n---\n")
        report = Validator(resolver).validate(spec)
        assert _kinds(report.errors) == ["invalid_spec"]
        assert report.output_path is None
