"""Two-tier (memory + disk) image cache.

Memory is a read-through/write-through accelerator over the disk tier,
which is the durable source of truth.
"""

from __future__ import annotations

import asyncio
import logging
import time
from pathlib import Path

from nanobanana.core.caching.backends.fs import DiskImageCache
from nanobanana.core.caching.backends.memory import MemoryLRUCache
from nanobanana.core.caching.models import CacheEntry, CacheKey, CacheLimits, CacheWriteResult
from nanobanana.core.imaging import is_decodable
from nanobanana.core.io import FileSystem, RealFileSystem, absolute_path

logger = logging.getLogger(__name__)


class ImageCache:
    """
    Content-addressed image cache keyed on the request fingerprint.

    Lookups check memory, then disk (repopulating memory on a disk hit).
    Stores write both tiers and never raise: a disk failure degrades to
    memory-only caching and is reported through CacheWriteResult.
    """

    def __init__(
        self,
        fs: FileSystem,
        root: Path | str,
        limits: CacheLimits | None = None,
    ) -> None:
        """
        Initialize the two-tier cache.

        Args:
            fs: Async filesystem implementation for the disk tier
            root: Cache directory (made absolute)
            limits: Memory tier bounds (defaults: 50 entries / 100MB)
        """
        self.memory = MemoryLRUCache(limits)
        self.disk = DiskImageCache(fs, absolute_path(root))

    @classmethod
    def at(cls, root: Path | str, limits: CacheLimits | None = None) -> ImageCache:
        """Build a cache on the real filesystem."""
        return cls(RealFileSystem(), root, limits)

    async def lookup(self, prompt: str, input_image: bytes | None = None) -> bytes | None:
        """Return cached image bytes, or None on miss."""
        key = CacheKey.for_request(prompt, input_image)

        entry = self.memory.get(key)
        if entry is not None:
            logger.debug("Memory cache hit for %s", key)
            return entry.image_bytes

        try:
            entry = await self.disk.load(key)
        except OSError as e:
            logger.warning("Disk cache read failed for %s, treating as miss: %s", key, e)
            return None

        if entry is None:
            return None

        if not await asyncio.to_thread(is_decodable, entry.image_bytes):
            logger.warning("Discarding undecodable disk cache entry %s", key)
            try:
                await self.disk.delete(key)
            except OSError as e:
                logger.warning("Failed to remove corrupt cache entry %s: %s", key, e)
            return None

        logger.debug("Disk cache hit for %s", key)
        self.memory.put(entry)
        return entry.image_bytes

    async def store(
        self, prompt: str, input_image: bytes | None, image_bytes: bytes
    ) -> CacheWriteResult:
        """Write an image to both tiers (best-effort)."""
        key = CacheKey.for_request(prompt, input_image)
        entry = CacheEntry(key=key, image_bytes=image_bytes, stored_at=time.time())

        self.memory.put(entry)
        result = CacheWriteResult(key=key, memory_stored=True)

        try:
            await self.disk.save(entry)
        except OSError as e:
            logger.warning("Disk cache write failed for %s: %s", key, e)
            result.error = str(e)
            return result

        result.disk_stored = True
        return result

    async def clear(self) -> None:
        """Evict all memory and disk entries."""
        self.memory.clear()
        try:
            await self.disk.clear()
        except OSError as e:
            logger.warning("Failed to clear disk cache at %s: %s", self.disk.root, e)

    async def size(self) -> int:
        """Return the on-disk footprint in bytes."""
        try:
            return await self.disk.size()
        except OSError as e:
            logger.warning("Failed to measure disk cache at %s: %s", self.disk.root, e)
            return 0


class ImageCacheSync:
    """
    Synchronous wrapper around ImageCache.

    Uses asyncio.run() to execute async operations in blocking mode.
    Suitable for scripts and CLI maintenance commands.
    """

    def __init__(self, cache: ImageCache) -> None:
        self._async_cache = cache

    def lookup(self, prompt: str, input_image: bytes | None = None) -> bytes | None:
        """Look up an image (blocking)."""
        return asyncio.run(self._async_cache.lookup(prompt, input_image))

    def store(
        self, prompt: str, input_image: bytes | None, image_bytes: bytes
    ) -> CacheWriteResult:
        """Store an image (blocking)."""
        return asyncio.run(self._async_cache.store(prompt, input_image, image_bytes))

    def clear(self) -> None:
        """Clear the cache (blocking)."""
        asyncio.run(self._async_cache.clear())

    def size(self) -> int:
        """Disk footprint in bytes (blocking)."""
        return asyncio.run(self._async_cache.size())
