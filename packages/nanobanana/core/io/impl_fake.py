"""In-memory filesystem for fast, isolated testing.

Simulates filesystem operations without disk I/O.
Async operations complete immediately but maintain async interface.
"""

import time
from pathlib import Path

from .models import AbsolutePath, FileStat, WriteResult


class FakeFileSystem:
    """
    In-memory async filesystem for testing.

    Not thread-safe (use per-test instance). Set ``fail_writes`` to make
    every write raise ``OSError``, which simulates a full or read-only disk.
    """

    def __init__(self) -> None:
        self._files: dict[str, bytes] = {}
        self._mtimes: dict[str, float] = {}
        self._dirs: set[str] = {"/"}
        self.fail_writes = False

    def join(self, base: AbsolutePath, *parts: str) -> AbsolutePath:
        """Join paths (sync - no I/O)."""
        result = Path(base).joinpath(*parts)

        if not result.is_absolute():
            result = Path("/") / result

        return AbsolutePath(result)

    async def exists(self, path: AbsolutePath) -> bool:
        """Check existence (async, immediate)."""
        path_str = str(Path(path))
        return path_str in self._files or path_str in self._dirs

    async def is_file(self, path: AbsolutePath) -> bool:
        """Check if file (async, immediate)."""
        return str(Path(path)) in self._files

    async def read_bytes(self, path: AbsolutePath) -> bytes:
        """Read bytes (async, immediate)."""
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return self._files[path_str]

    async def write_bytes(self, path: AbsolutePath, content: bytes) -> WriteResult:
        """Write bytes (async, immediate)."""
        if self.fail_writes:
            raise OSError(f"Simulated write failure: {path}")

        path_obj = Path(path)
        path_str = str(path_obj)

        if str(path_obj.parent) not in self._dirs:
            self._ensure_parents(path_obj.parent)

        self._files[path_str] = bytes(content)
        self._mtimes[path_str] = time.time()

        return WriteResult(path=path_str, bytes_written=len(content), duration_ms=0.0)

    def _ensure_parents(self, path: Path) -> None:
        """Recursively create parent directories (sync helper)."""
        parts = path.parts
        for i in range(1, len(parts) + 1):
            self._dirs.add(str(Path(*parts[:i])))

    async def stat(self, path: AbsolutePath) -> FileStat:
        """Stat file (async, immediate)."""
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        return FileStat(size_bytes=len(self._files[path_str]), modified_at=self._mtimes[path_str])

    async def mkdirs(self, path: AbsolutePath, exist_ok: bool = True) -> None:
        """Create directory (async, immediate)."""
        path_str = str(Path(path))
        if not exist_ok and path_str in self._dirs:
            raise FileExistsError(f"Directory exists: {path}")
        self._ensure_parents(Path(path))

    async def listdir(self, path: AbsolutePath) -> list[str]:
        """List directory (async, immediate)."""
        path_str = str(Path(path))
        if path_str not in self._dirs:
            raise FileNotFoundError(f"Directory not found: {path}")

        children = []
        for file_path in self._files:
            if Path(file_path).parent == Path(path_str):
                children.append(Path(file_path).name)
        for dir_path in self._dirs:
            if dir_path != path_str and Path(dir_path).parent == Path(path_str):
                children.append(Path(dir_path).name)

        return sorted(set(children))

    async def remove(self, path: AbsolutePath) -> None:
        """Remove file (async, immediate)."""
        path_str = str(Path(path))
        if path_str not in self._files:
            raise FileNotFoundError(f"File not found: {path}")
        del self._files[path_str]
        self._mtimes.pop(path_str, None)

    async def rmdir(self, path: AbsolutePath, recursive: bool = False) -> None:
        """Remove directory (async, immediate)."""
        path_str = str(Path(path))
        if path_str not in self._dirs:
            raise FileNotFoundError(f"Directory not found: {path}")

        if recursive:
            for p in [p for p in self._files if p.startswith(path_str + "/")]:
                del self._files[p]
                self._mtimes.pop(p, None)
            for p in [p for p in self._dirs if p.startswith(path_str + "/")]:
                self._dirs.discard(p)

        self._dirs.discard(path_str)
