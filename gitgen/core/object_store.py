"""Content-addressed, immutable object store for generated outputs.

Storage layout: {base_path}/{sha256[0:2]}/{sha256[2:]}
No delete method — objects are immutable once stored.
"""

from __future__ import annotations

import logging
from pathlib import Path

from gitgen.core.hasher import sha256_hex
from gitgen.errors import ObjectIntegrityError, ObjectNotFoundError

logger = logging.getLogger(__name__)


class ContentAddressedStore:
    """SHA-256 keyed, immutable text store.

    Every object is stored under the SHA-256 digest of its UTF-8 bytes.
    Storing the same content twice is a no-op (idempotent).  There is no
    update or delete.

    Parameters
    ----------
    base_path:
        The ``objects`` directory.  Created lazily on the first write.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)

    @property
    def base_path(self) -> Path:
        return self._base

    def _object_path(self, digest: str) -> Path:
        """Layout: {base}/{sha256[0:2]}/{sha256[2:]}"""
        return self._base / digest[:2] / digest[2:]

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    def write(self, content: str) -> str:
        """Store *content* and return its hash.

        If the object already exists, verifies its integrity instead of
        overwriting it.
        """
        data = content.encode("utf-8")
        digest = sha256_hex(data)
        path = self._object_path(digest)

        if path.exists():
            if not self.verify(digest):
                raise ObjectIntegrityError(
                    f"Existing object at {digest} failed integrity check"
                )
            logger.debug("Object %s already stored", digest[:7])
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            logger.debug("Stored object %s (%d bytes)", digest[:7], len(data))
        return digest

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def read(self, digest: str) -> str:
        """Return the text stored under *digest*."""
        path = self._object_path(digest)
        if not path.is_file():
            raise ObjectNotFoundError(digest)
        return path.read_bytes().decode("utf-8")

    # ------------------------------------------------------------------
    # Check and verify
    # ------------------------------------------------------------------

    def exists(self, digest: str) -> bool:
        return self._object_path(digest).is_file()

    def verify(self, digest: str) -> bool:
        """Re-hash stored bytes and compare against *digest*."""
        path = self._object_path(digest)
        if not path.is_file():
            return False
        return sha256_hex(path.read_bytes()) == digest
