"""Filesystem abstraction layer for nanobanana.

Provides safe, testable, async-first filesystem operations used by the
disk tier of the image cache.

Example:
    >>> from nanobanana.core.io import RealFileSystem, absolute_path
    >>> fs = RealFileSystem()
    >>> path = fs.join(absolute_path("/tmp"), "cache", "abc.img")
    >>> await fs.write_bytes(path, b"...")
    >>> data = await fs.read_bytes(path)
"""

from .impl_fake import FakeFileSystem
from .impl_real import RealFileSystem
from .models import AbsolutePath, FileStat, WriteResult, absolute_path
from .protocols import FileSystem

__all__ = [
    "AbsolutePath",
    "absolute_path",
    "FileStat",
    "WriteResult",
    "FileSystem",
    "RealFileSystem",
    "FakeFileSystem",
]
