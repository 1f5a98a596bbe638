"""Filesystem-backed tier for the image cache.

One file per key under the cache root; unbounded and durable across
restarts.
"""

import asyncio
import logging

from nanobanana.core.caching.models import CacheEntry, CacheKey
from nanobanana.core.io import AbsolutePath, FileSystem

logger = logging.getLogger(__name__)

ENTRY_SUFFIX = ".img"


class DiskImageCache:
    """
    Async filesystem-backed image store.

    The store lazily initializes on first use. Read errors are surfaced to
    the caller; the two-tier cache decides how to degrade.
    """

    def __init__(self, fs: FileSystem, root: AbsolutePath) -> None:
        """
        Initialize disk cache.

        Args:
            fs: Async filesystem implementation
            root: Absolute path to cache root directory
        """
        self.fs = fs
        self.root = root
        self._initialized = False
        self._init_lock = asyncio.Lock()

    async def initialize(self) -> None:
        """
        Ensure the cache root exists.

        Called automatically on first use. Safe to call multiple times.
        """
        async with self._init_lock:
            if not self._initialized:
                await self.fs.mkdirs(self.root, exist_ok=True)
                self._initialized = True

    def _entry_path(self, key: CacheKey) -> AbsolutePath:
        """Compute entry file path (sync)."""
        return self.fs.join(self.root, f"{key.fingerprint}{ENTRY_SUFFIX}")

    async def load(self, key: CacheKey) -> CacheEntry | None:
        """
        Load an entry.

        Returns:
            The entry, or None if no file exists for the key

        Raises:
            OSError: On read failure other than a missing file
        """
        await self.initialize()
        path = self._entry_path(key)
        try:
            data, stat = await asyncio.gather(self.fs.read_bytes(path), self.fs.stat(path))
        except FileNotFoundError:
            return None
        return CacheEntry(key=key, image_bytes=data, stored_at=stat.modified_at)

    async def save(self, entry: CacheEntry) -> None:
        """
        Write an entry atomically, replacing any previous file.

        Raises:
            OSError: On write failure
        """
        await self.initialize()
        await self.fs.write_bytes(self._entry_path(entry.key), entry.image_bytes)

    async def delete(self, key: CacheKey) -> None:
        """Remove the entry file for a key, if present."""
        try:
            await self.fs.remove(self._entry_path(key))
        except FileNotFoundError:
            pass

    async def clear(self) -> None:
        """Remove every entry and recreate an empty root."""
        if await self.fs.exists(self.root):
            await self.fs.rmdir(self.root, recursive=True)
        await self.fs.mkdirs(self.root, exist_ok=True)
        self._initialized = True

    async def size(self) -> int:
        """
        Sum the sizes of entry files (stray temp files are ignored).

        Files removed while enumerating are skipped, so the result is
        approximate under concurrent mutation.
        """
        await self.initialize()
        try:
            names = await self.fs.listdir(self.root)
        except FileNotFoundError:
            return 0

        total = 0
        for name in names:
            if not name.endswith(ENTRY_SUFFIX):
                continue
            try:
                stat = await self.fs.stat(self.fs.join(self.root, name))
            except (FileNotFoundError, IsADirectoryError):
                continue
            total += stat.size_bytes
        return total
