"""Tests for walk_files and default_ignore."""

from __future__ import annotations

from pathlib import Path

from gitgen.core.layout import is_spec_file
from gitgen.core.walker import default_ignore, walk_files


def test_finds_specs_in_sorted_order(write_file, tmp_dir: Path):
    write_file("b/z.gitgen.md", "")
    write_file("a.gitgen.md", "")
    write_file("b/a.gitgen.md", "")
    write_file("b/readme.md", "")
    found = list(walk_files(tmp_dir, is_spec_file))
    assert found == [tmp_dir / "a.gitgen.md", tmp_dir / "b" / "a.gitgen.md", tmp_dir / "b" / "z.gitgen.md"]


def test_default_ignore_prunes_store_and_dependencies(write_file, tmp_dir: Path):
    write_file(".gitgen/objects/x.gitgen.md", "")
    write_file("node_modules/pkg/y.gitgen.md", "")
    write_file(".git/z.gitgen.md", "")
    keep = write_file("src/keep.gitgen.md", "")
    assert list(walk_files(tmp_dir, is_spec_file)) == [keep]


def test_custom_ignore(write_file, tmp_dir: Path):
    write_file("vendor/a.gitgen.md", "")
    write_file("node_modules/b.gitgen.md", "")
    found = list(walk_files(tmp_dir, is_spec_file, ignore=lambda p: p.name == "vendor"))
    assert found == [tmp_dir / "node_modules" / "b.gitgen.md"]
    assert default_ignore(Path("x/__pycache__"))
    assert not default_ignore(Path("x/src"))
