"""Tests for the two-tier ImageCache.

Covers read-through/write-through behavior between memory and disk,
best-effort stores, and clear/size semantics.
"""

from pathlib import Path

import pytest

from nanobanana.core.caching import (
    CacheKey,
    CacheLimits,
    ImageCache,
    ImageCacheSync,
    NullImageCache,
)
from nanobanana.core.io import FakeFileSystem


@pytest.fixture
def fs():
    """Provide fresh FakeFileSystem instance."""
    return FakeFileSystem()


@pytest.fixture
def cache(fs: FakeFileSystem):
    return ImageCache(fs, "/cache")


class TestLookupAndStore:
    async def test_miss_returns_none(self, cache: ImageCache):
        assert await cache.lookup("never stored") is None

    async def test_store_then_lookup(self, cache: ImageCache, png_bytes: bytes):
        result = await cache.store("p", None, b"generated")

        assert result.ok
        assert await cache.lookup("p") == b"generated"

    async def test_input_image_is_part_of_key(self, cache: ImageCache, png_bytes: bytes):
        await cache.store("p", png_bytes, b"edited")

        assert await cache.lookup("p", png_bytes) == b"edited"
        assert await cache.lookup("p") is None

    async def test_store_writes_both_tiers(self, cache: ImageCache):
        await cache.store("p", None, b"generated")

        key = CacheKey.for_request("p")
        assert key in cache.memory
        disk_entry = await cache.disk.load(key)
        assert disk_entry is not None
        assert disk_entry.image_bytes == b"generated"

    async def test_disk_hit_repopulates_memory(self, cache: ImageCache, png_bytes: bytes):
        await cache.store("p", None, png_bytes)
        cache.memory.clear()

        assert await cache.lookup("p") == png_bytes
        assert CacheKey.for_request("p") in cache.memory

    async def test_survives_new_instance(self, fs: FakeFileSystem, png_bytes: bytes):
        """Test the disk tier is durable across cache instances."""
        await ImageCache(fs, "/cache").store("p", None, png_bytes)

        assert await ImageCache(fs, "/cache").lookup("p") == png_bytes

    async def test_memory_bounds_apply(self, fs: FakeFileSystem, make_png):
        cache = ImageCache(fs, "/cache", CacheLimits(count_limit=1))
        first = make_png((1, 2, 3))
        await cache.store("a", None, first)
        await cache.store("b", None, make_png((4, 5, 6)))

        assert len(cache.memory) == 1
        assert await cache.lookup("a") == first  # still on disk


class TestCorruptEntries:
    async def test_undecodable_disk_entry_is_miss(self, fs: FakeFileSystem, cache: ImageCache):
        key = CacheKey.for_request("p")
        await cache.disk.initialize()
        await fs.write_bytes(cache.disk._entry_path(key), b"not an image")

        assert await cache.lookup("p") is None
        assert key not in cache.memory

    async def test_undecodable_disk_entry_removed(self, fs: FakeFileSystem, cache: ImageCache):
        key = CacheKey.for_request("p")
        path = cache.disk._entry_path(key)
        await cache.disk.initialize()
        await fs.write_bytes(path, b"not an image")

        await cache.lookup("p")

        assert not await fs.exists(path)

    async def test_store_after_corruption_serves_new_image(
        self, fs: FakeFileSystem, cache: ImageCache, png_bytes: bytes
    ):
        await cache.disk.initialize()
        await fs.write_bytes(cache.disk._entry_path(CacheKey.for_request("p")), b"garbage")
        await cache.lookup("p")

        await cache.store("p", None, png_bytes)
        cache.memory.clear()

        assert await cache.lookup("p") == png_bytes


class TestBestEffortWrites:
    async def test_disk_failure_is_reported_not_raised(
        self, fs: FakeFileSystem, cache: ImageCache
    ):
        fs.fail_writes = True

        result = await cache.store("p", None, b"generated")

        assert result.memory_stored
        assert not result.disk_stored
        assert result.error is not None
        assert not result.ok

    async def test_memory_still_serves_after_disk_failure(
        self, fs: FakeFileSystem, cache: ImageCache
    ):
        fs.fail_writes = True
        await cache.store("p", None, b"generated")

        assert await cache.lookup("p") == b"generated"


class TestClearAndSize:
    async def test_clear_then_lookup_is_absent(self, cache: ImageCache):
        await cache.store("a", None, b"1111")
        await cache.store("b", None, b"22")

        await cache.clear()

        assert await cache.lookup("a") is None
        assert await cache.lookup("b") is None
        assert await cache.size() == 0

    async def test_size_is_disk_footprint(self, cache: ImageCache):
        await cache.store("a", None, b"1111")
        await cache.store("b", None, b"22")

        assert await cache.size() == 6

    async def test_cache_usable_after_clear(self, cache: ImageCache):
        await cache.clear()
        await cache.store("a", None, b"1")

        assert await cache.lookup("a") == b"1"


class TestRealFilesystem:
    async def test_round_trip_on_disk(self, tmp_path: Path, png_bytes: bytes):
        cache = ImageCache.at(tmp_path / "images")

        await cache.store("p", None, png_bytes)

        files = list((tmp_path / "images").iterdir())
        assert [f.suffix for f in files] == [".img"]
        assert await ImageCache.at(tmp_path / "images").lookup("p") == png_bytes


class TestImageCacheSync:
    def test_blocking_wrapper(self, tmp_path: Path):
        cache = ImageCacheSync(ImageCache.at(tmp_path))

        cache.store("p", None, b"12345")

        assert cache.lookup("p") == b"12345"
        assert cache.size() == 5
        cache.clear()
        assert cache.lookup("p") is None
        assert cache.size() == 0


class TestNullImageCache:
    async def test_always_misses(self):
        cache = NullImageCache()
        result = await cache.store("p", None, b"1")

        assert await cache.lookup("p") is None
        assert not result.memory_stored
        assert result.error is None
        assert await cache.size() == 0
