"""
Filesystem storage backend.

Text is read and written as UTF-8. Every OSError is re-raised as a
StorageError naming the path, so callers deal with one exception family.
"""

import logging
from pathlib import Path

from .errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)


class LocalStorage:
    """StorageProtocol implementation on the local filesystem."""

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def read(self, path: Path) -> str:
        try:
            return Path(path).read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise NotFoundError(f"File not found: {path}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Failed to read file {path}: {e}") from e

    def write(self, path: Path, text: str) -> None:
        path = Path(path)
        self.mkdir(path.parent)
        try:
            path.write_text(text, encoding="utf-8")
        except OSError as e:
            raise StorageError(f"Failed to write file {path}: {e}") from e
        logger.debug("Wrote %s (%d chars)", path, len(text))

    def list(self, directory: Path) -> list[str]:
        directory = Path(directory)
        if not directory.exists():
            return []
        try:
            return sorted(entry.name for entry in directory.iterdir())
        except OSError as e:
            raise StorageError(f"Failed to list files in {directory}: {e}") from e

    def mkdir(self, path: Path) -> None:
        try:
            Path(path).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Failed to create directory {path}: {e}") from e
