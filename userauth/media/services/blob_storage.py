"""
Blob storage for uploaded files.

BlobStorage is the seam for swapping the local directory for an object
store; callers only ever see the returned reference.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class BlobStorage(ABC):
    """Stores bytes under a key and returns a reference to them."""

    @abstractmethod
    async def store(self, key: str, data: bytes) -> str:
        """
        Persist data.

        Args:
            key: Storage key (relative path)
            data: File contents

        Returns:
            Reference (URL) the stored bytes can be retrieved from
        """
        pass


class LocalBlobStorage(BlobStorage):
    """
    Writes blobs into a local directory served under a URL prefix.
    """

    def __init__(self, directory: str | Path, url_prefix: str = "/uploads"):
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")

    def ensure_directory(self) -> None:
        """Create the storage directory if it doesn't exist."""
        self.directory.mkdir(parents=True, exist_ok=True)

    def _resolve(self, key: str) -> Path:
        root = self.directory.resolve()
        path = (root / key).resolve()
        if root != path and root not in path.parents:
            raise ValueError(f"Storage key escapes upload directory: {key!r}")
        return path

    def _write(self, path: Path, data: bytes) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

    async def store(self, key: str, data: bytes) -> str:
        path = self._resolve(key)
        await asyncio.to_thread(self._write, path, data)
        logger.debug(f"Stored {len(data)} bytes at {path}")
        return f"{self.url_prefix}/{key}"
