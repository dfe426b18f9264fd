"""Filesystem access used by the converter.

The converter needs to probe, read, write and create a directory; the
analyzer also asks for file sizes. Keeping them behind a small interface
lets tests swap in failing or recording implementations.
"""

from abc import ABC, abstractmethod
from pathlib import Path


class FileSystem(ABC):
    """Abstract filesystem capability set."""

    @abstractmethod
    def exists(self, path: Path) -> bool:
        """Check whether the path exists."""
        ...

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """Read a UTF-8 text file."""
        ...

    @abstractmethod
    def write_text(self, path: Path, content: str) -> None:
        """Write a UTF-8 text file, replacing any existing content."""
        ...

    @abstractmethod
    def mkdir(self, path: Path) -> None:
        """Create a directory (and parents). No-op if it already exists."""
        ...

    @abstractmethod
    def size(self, path: Path) -> int:
        """Size of a file in bytes."""
        ...


class DiskFileSystem(FileSystem):
    """Local disk implementation."""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def read_text(self, path: Path) -> str:
        return Path(path).read_text(encoding="utf-8")

    def write_text(self, path: Path, content: str) -> None:
        Path(path).write_text(content, encoding="utf-8")

    def mkdir(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def size(self, path: Path) -> int:
        return Path(path).stat().st_size
