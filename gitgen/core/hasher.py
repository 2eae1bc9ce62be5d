"""Canonical hashing helpers for content addressing and commit identifiers."""

from __future__ import annotations

import hashlib
import json
from datetime import datetime, timezone
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Produce canonical JSON bytes — deterministic, sorted, compact.

    - sorted keys
    - no whitespace separators (",", ":")
    - ensure_ascii=True
    - UTF-8 encoding
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True, default=str
    ).encode("utf-8")


def sha256_hex(data: bytes | str) -> str:
    """Return the SHA-256 hex digest of raw bytes or UTF-8 text."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def compute_commit_hash(
    message: str,
    entries: list[dict[str, Any]],
    timestamp: datetime | None = None,
) -> str:
    """SHA-256 of canonical(message + entries + timestamp).

    The wall-clock timestamp is part of the input, so two commits of the
    same logical content at different times get different hashes.
    """
    ts = timestamp or datetime.now(timezone.utc)
    payload = {"message": message, "entries": entries, "timestamp": ts.isoformat()}
    return sha256_hex(canonical_json_bytes(payload))


def compute_generation_hash(
    spec_path: str,
    output_path: str,
    content_hash: str,
    message: str,
    timestamp: datetime,
) -> str:
    """SHA-256 identifying one generation-log entry."""
    payload = {
        "spec_path": spec_path,
        "output_path": output_path,
        "content_hash": content_hash,
        "message": message,
        "timestamp": timestamp.isoformat(),
    }
    return sha256_hex(canonical_json_bytes(payload))
