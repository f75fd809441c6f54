"""
Protocol definition for the storage backend used by FactStore.

FactStore never touches the filesystem directly; it goes through an
object satisfying StorageProtocol. LocalStorage is the filesystem
implementation; tests substitute an in-memory one.
"""

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class StorageProtocol(Protocol):
    """
    Minimal file-like storage.

    Failures are reported as ``projfacts.errors.StorageError``
    (``NotFoundError`` for a missing path on read).
    """

    def exists(self, path: Path) -> bool: ...

    def read(self, path: Path) -> str: ...

    def write(self, path: Path, text: str) -> None:
        """Write text, creating parent directories as needed."""
        ...

    def list(self, directory: Path) -> list[str]:
        """Entry names in a directory; empty if the directory is absent."""
        ...

    def mkdir(self, path: Path) -> None:
        """Create a directory and its parents; no error if it exists."""
        ...
