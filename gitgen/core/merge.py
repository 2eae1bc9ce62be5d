"""Merge primitives shared by the cascading resolver and the compactor.

Arrays and bodies are combined per a configured strategy; examples are
always concatenated and then de-duplicated on their ``input`` field.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Any, TypeVar

from gitgen.models.spec import OneShotExample

T = TypeVar("T")


class ArrayMergeStrategy(str, Enum):
    CONCATENATE = "concatenate"
    PREPEND = "prepend"
    REPLACE = "replace"
    DEDUPE = "dedupe"
    DEDUPE_LAST = "dedupe-last"


class BodyMergeStrategy(str, Enum):
    APPEND = "append"
    PREPEND = "prepend"
    REPLACE = "replace"


def deduplicate(items: Sequence[T]) -> list[T]:
    """Keep the first occurrence of each item, preserving order.

    Compares by equality so unhashable items (YAML mappings) work too.
    """
    result: list[T] = []
    for item in items:
        if item not in result:
            result.append(item)
    return result


def _deduplicate_last(items: Sequence[T]) -> list[T]:
    kept_reversed = deduplicate(list(reversed(items)))
    return list(reversed(kept_reversed))


def merge_arrays(
    parent: Sequence[T],
    child: Sequence[T],
    strategy: ArrayMergeStrategy,
) -> list[T]:
    """Combine a parent and child array per *strategy*.

    An empty side yields the other side unchanged, for every strategy;
    an empty child therefore never clears the parent, even under ``replace``.
    """
    if not child:
        return list(parent)
    if not parent:
        return list(child)
    if strategy == ArrayMergeStrategy.REPLACE:
        return list(child)
    if strategy == ArrayMergeStrategy.PREPEND:
        return [*child, *parent]
    if strategy == ArrayMergeStrategy.DEDUPE:
        return deduplicate([*parent, *child])
    if strategy == ArrayMergeStrategy.DEDUPE_LAST:
        return _deduplicate_last([*parent, *child])
    return [*parent, *child]


def merge_body(parent: str, child: str, strategy: BodyMergeStrategy) -> str:
    """Combine two bodies; a blank side yields the other side unchanged."""
    if not parent.strip():
        return child
    if not child.strip():
        return parent
    if strategy == BodyMergeStrategy.REPLACE:
        return child
    if strategy == BodyMergeStrategy.PREPEND:
        return f"{child}\n\n{parent}"
    return f"{parent}\n\n{child}"


def merge_examples(
    parent: Sequence[OneShotExample],
    child: Sequence[OneShotExample],
) -> list[OneShotExample]:
    """Concatenate, then drop later examples whose ``input`` was already seen."""
    seen: set[str] = set()
    merged: list[OneShotExample] = []
    for example in [*parent, *child]:
        if example.input in seen:
            continue
        seen.add(example.input)
        merged.append(example)
    return merged


def merge_frontmatter(
    parent: Mapping[str, Any],
    child: Mapping[str, Any],
    strategies: Mapping[str, ArrayMergeStrategy] | None = None,
    default: ArrayMergeStrategy = ArrayMergeStrategy.CONCATENATE,
) -> dict[str, Any]:
    """Merge two front-matter mappings key by key.

    When both sides hold a list, the lists are merged with the strategy
    registered for that key (falling back to *default*).  Otherwise the
    child value wins outright, ``None`` included.
    """
    strategies = strategies or {}
    merged: dict[str, Any] = dict(parent)
    for key, value in child.items():
        existing = merged.get(key)
        if isinstance(existing, list) and isinstance(value, list):
            merged[key] = merge_arrays(existing, value, strategies.get(key, default))
        else:
            merged[key] = value
    return merged
