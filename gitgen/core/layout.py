"""File and directory names that make up a gitgen repository.

Store layout (relative to the repository root)::

    .gitgen/
        HEAD                     "ref: refs/heads/<branch>"
        config                   JSON
        index                    JSON
        objects/<aa>/<rest>      content-addressed blobs
        refs/heads/<branch>      latest commit hash, empty before the first commit
        logs/generations.jsonl   append-only generation history
        stash/                   reserved
"""

from __future__ import annotations

from pathlib import Path

STORE_DIR_NAME = ".gitgen"
SPEC_SUFFIX = ".gitgen.md"
DIRECTORY_SPEC_NAME = ".gitgen.md"

HEAD_FILE = "HEAD"
CONFIG_FILE = "config"
INDEX_FILE = "index"
OBJECTS_DIR = "objects"
REFS_HEADS_DIR = Path("refs") / "heads"
LOGS_DIR = "logs"
GENERATIONS_LOG = "generations.jsonl"
STASH_DIR = "stash"

HEAD_REF_PREFIX = "ref: refs/heads/"


def is_spec_file(path: Path) -> bool:
    """True for leaf specs and directory-level specs alike."""
    return path.name.endswith(SPEC_SUFFIX)


def is_directory_spec(path: Path) -> bool:
    return path.name == DIRECTORY_SPEC_NAME
