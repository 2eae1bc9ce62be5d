"""Tests for Compactor — explicit ordering, per-fragment path resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from gitgen.core.compactor import Compactor, to_relative_path
from gitgen.core.merge import ArrayMergeStrategy
from gitgen.core.parser import SpecParser
from gitgen.errors import EmptyChainError, SpecParseError


class TestCompactor:
    def test_empty_input_raises(self, tmp_dir: Path):
        with pytest.raises(EmptyChainError):
            Compactor(base_path=tmp_dir).compact([])

    def test_caller_order_is_respected(self, write_file, tmp_dir: Path):
        first = write_file("z/first.gitgen.md", "---\nname: first\n---\nFirst.\n")
        second = write_file("a/second.gitgen.md", "---\nname: second\n---\nSecond.\n")
        merged = Compactor(base_path=tmp_dir).compact([first, second])
        assert merged.frontmatter.name == "second"
        assert merged.body == "First.\n\nSecond."
        assert merged.sources == [first, second]

    def test_paths_resolved_per_fragment_then_deduplicated(self, write_file, tmp_dir: Path):
        one = write_file("a/one.gitgen.md", "---\ncontext: [./x.py]\n---\n")
        two = write_file("b/two.gitgen.md", "---\ncontext: [../a/x.py, ./y.py]\n---\n")
        merged = Compactor(base_path=tmp_dir).compact([one, two])
        assert merged.frontmatter.context == ["./a/x.py", "./b/y.py"]

    def test_dedupe_applies_even_with_concatenate(self, write_file, tmp_dir: Path):
        one = write_file("one.gitgen.md", "---\nskills: [./s.md]\n---\n")
        two = write_file("two.gitgen.md", "---\nskills: [./s.md]\n---\n")
        merged = Compactor(
            base_path=tmp_dir, array_merge=ArrayMergeStrategy.CONCATENATE
        ).compact([one, two])
        assert merged.frontmatter.skills == ["./s.md"]

    def test_resolve_paths_keeps_absolute(self, write_file, tmp_dir: Path):
        one = write_file("a/one.gitgen.md", "---\ncontext: [./x.py]\n---\n")
        merged = Compactor(base_path=tmp_dir, resolve_paths=True).compact([one])
        assert merged.frontmatter.context == [str(tmp_dir / "a" / "x.py")]

    def test_output_path(self, write_file, tmp_dir: Path):
        one = write_file("one.gitgen.md", "---\nname: x\n---\n")
        merged = Compactor(base_path=tmp_dir, output="all.gitgen.md").compact([one])
        assert merged.file_path == tmp_dir / "all.gitgen.md"

    def test_output_key_is_kept_as_written(self, write_file, tmp_dir: Path):
        one = write_file("pkg/a.gitgen.md", "---\ncontext: [./x.py]\noutput: out.md\n---\n")
        merged = Compactor(base_path=tmp_dir).compact([one])
        assert merged.frontmatter.output == "out.md"
        assert merged.frontmatter.context == ["./pkg/x.py"]
        assert "output: out.md" in Compactor.serialize(merged)

    def test_unparsable_input_is_fatal(self, write_file, tmp_dir: Path):
        good = write_file("good.gitgen.md", "---\nname: x\n---\n")
        bad = write_file("bad.gitgen.md", "---\nname: [oops\n---\n")
        with pytest.raises(SpecParseError):
            Compactor(base_path=tmp_dir).compact([good, bad])

    def test_serialize_parses_back(self, write_file, tmp_dir: Path):
        one = write_file(
            "one.gitgen.md",
            "---\nname: x\ncontext: [./a.py]\n---\nBody.\n<example>\nq\n---\na\n</example>\n",
        )
        merged = Compactor(base_path=tmp_dir).compact([one])
        text = Compactor.serialize(merged)
        again = SpecParser().parse_content(text, merged.file_path)
        assert again.frontmatter.context == ["./a.py"]
        assert again.body == "Body."
        assert [e.input for e in again.examples] == ["q"]


class TestToRelativePath:
    def test_adds_dot_prefix(self, tmp_dir: Path):
        assert to_relative_path(str(tmp_dir / "a" / "b.py"), tmp_dir) == "./a/b.py"

    def test_parent_paths_unchanged(self, tmp_dir: Path):
        assert to_relative_path(str(tmp_dir.parent / "x.py"), tmp_dir) == "../x.py"
