"""Protocols for filesystem operations.

Defines the async-first FileSystem protocol used by the disk cache tier.
"""

from typing import Protocol

from .models import AbsolutePath, FileStat, WriteResult


class FileSystem(Protocol):
    """
    Protocol for async filesystem operations.

    All implementations must provide atomic write semantics and
    handle platform-specific details transparently.
    """

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """
        Safely join path components.

        Args:
            base: Base absolute path
            *parts: Path segments to join

        Returns:
            New absolute path

        Raises:
            ValueError: If result escapes base directory
        """
        ...

    async def exists(self, path: AbsolutePath) -> bool:
        """Check if path exists (file or directory)."""
        ...

    async def is_file(self, path: AbsolutePath) -> bool:
        """Check if path exists and is a file."""
        ...

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """
        Read binary file contents.

        Raises:
            FileNotFoundError: If file doesn't exist
            OSError: On read failure
        """
        ...

    async def write_bytes(self, path: AbsolutePath, content: bytes) -> WriteResult:
        """
        Atomically write bytes to file.

        Uses temp file + atomic replace to ensure readers never
        observe partial writes.

        Raises:
            OSError: On write failure
        """
        ...

    async def stat(self, path: AbsolutePath) -> FileStat:
        """
        Return size and modification time of a file.

        Raises:
            FileNotFoundError: If file doesn't exist
        """
        ...

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """Create directory and all parents."""
        ...

    async def listdir(self, path: AbsolutePath) -> list[str]:
        """
        List directory contents (names only).

        Raises:
            FileNotFoundError: If directory doesn't exist
        """
        ...

    async def remove(self, path: AbsolutePath) -> None:
        """Remove a file."""
        ...

    async def rmdir(self, path: AbsolutePath, recursive: bool = False) -> None:
        """Remove a directory."""
        ...
