"""
Project Facts

A local, file-backed knowledge store for solved problems. Insights are
recorded as markdown documents, indexed in KNOWLEDGE.md, and searched with
a lexical relevance score. Mandatory project commands from USER_COMMAND.md
always come first in search results.

Quick Start:
    from projfacts import FactStore, InsightRecord, load_config

    store = FactStore(load_config())  # uses .bkproj/facts/ under the cwd
    store.initialize()
    store.record(InsightRecord(
        task="implement login", solution="use JWT",
        reasoning="stateless", category="technical",
    ))
    results = store.search("implement login")

CLI Usage:
    proj-facts init
    proj-facts solve "which package manager"
    proj-facts mcp

Environment Variables:
    FACTS_PROJECT_PATH  - Project directory (default: current directory)
    FACTS_ROOT          - Facts root (default: <project>/.bkproj/facts)
    FACTS_HOME          - Directory for error and ops logs (default: ~/.proj-facts)
    FACTS_VERBOSE       - Set to 1 for debug logging
"""

from .api import FactStore
from .config import FactsConfig, load_config
from .errors import FactsError, NotFoundError, StorageError, ValidationError
from .types import (
    Category,
    Command,
    Confidence,
    Document,
    FactDocument,
    InsightRecord,
    ProjectContext,
    SearchOptions,
)

__version__ = "0.1.0"
__all__ = [
    "Category",
    "Command",
    "Confidence",
    "Document",
    "FactDocument",
    "FactStore",
    "FactsConfig",
    "FactsError",
    "InsightRecord",
    "NotFoundError",
    "ProjectContext",
    "SearchOptions",
    "StorageError",
    "ValidationError",
    "load_config",
]
