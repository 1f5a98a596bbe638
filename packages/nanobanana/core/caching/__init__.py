"""Image caching for nanobanana.

Content-addressed, two-tier caching of generated images:
- SHA-256 request fingerprints over prompt + input image bytes
- Bounded LRU memory tier (count and byte-cost limits)
- Unbounded disk tier, one file per key, atomic writes
- Best-effort stores (I/O failures are logged, never raised)
"""

from nanobanana.core.caching.backends.fs import DiskImageCache
from nanobanana.core.caching.backends.memory import MemoryLRUCache
from nanobanana.core.caching.backends.null import NullImageCache
from nanobanana.core.caching.fingerprint import compute_fingerprint
from nanobanana.core.caching.models import (
    CacheEntry,
    CacheKey,
    CacheLimits,
    CacheWriteResult,
)
from nanobanana.core.caching.protocols import Cache
from nanobanana.core.caching.store import ImageCache, ImageCacheSync

__all__ = [
    # Core
    "Cache",
    "CacheKey",
    "CacheEntry",
    "CacheLimits",
    "CacheWriteResult",
    "ImageCache",
    "ImageCacheSync",
    # Tiers
    "DiskImageCache",
    "MemoryLRUCache",
    "NullImageCache",
    # Utils
    "compute_fingerprint",
]
