"""Cache tier implementations."""

from nanobanana.core.caching.backends.fs import DiskImageCache
from nanobanana.core.caching.backends.memory import MemoryLRUCache
from nanobanana.core.caching.backends.null import NullImageCache

__all__ = ["DiskImageCache", "MemoryLRUCache", "NullImageCache"]
