"""
On-disk layout of a facts store.

All paths are derived from a single root; nothing here touches the
filesystem.
"""

import os
from dataclasses import dataclass
from pathlib import Path


# Root directory relative to the project, unless overridden
DEFAULT_ROOT = Path(".bkproj") / "facts"

SOLUTIONS_DIR = "solutions"
DOCS_DIR = "docs"
COMMANDS_FILENAME = "USER_COMMAND.md"
KNOWLEDGE_FILENAME = "KNOWLEDGE.md"
DOCUMENT_SUFFIX = ".md"


def get_tool_directory() -> Path:
    """Per-user directory for logs (``~/.proj-facts`` or ``$FACTS_HOME``)."""
    home = os.environ.get("FACTS_HOME")
    if home:
        return Path(home)
    return Path.home() / ".proj-facts"


@dataclass(frozen=True)
class StoreLayout:
    """Canonical sub-paths of a facts root."""
    root: Path

    @classmethod
    def for_project(cls, project_path: Path) -> "StoreLayout":
        return cls(Path(project_path) / DEFAULT_ROOT)

    @property
    def solutions(self) -> Path:
        return self.root / SOLUTIONS_DIR

    @property
    def docs(self) -> Path:
        return self.root / DOCS_DIR

    @property
    def collections(self) -> tuple[Path, Path]:
        """Document directories in scan order."""
        return (self.solutions, self.docs)

    @property
    def commands_file(self) -> Path:
        return self.root / COMMANDS_FILENAME

    @property
    def knowledge_file(self) -> Path:
        return self.root / KNOWLEDGE_FILENAME

    @property
    def templates(self) -> Path:
        return self.root / "templates"

    @property
    def insight_template(self) -> Path:
        return self.templates / "insight-template.md"
