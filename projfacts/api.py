"""
Core API for the facts store.

FactStore composes the parser, scorer, command matcher, writer and index
builder over a storage backend:

- search(): project commands first, then scored documents
- record(): write an insight, regenerate the index
- get_context(): aggregate snapshot of the collection
- initialize(): create the directory layout
"""

import logging
from pathlib import Path
from typing import Iterator, Optional

from .commands import command_result, match_commands, parse_commands
from .config import FactsConfig
from .errors import StorageError
from .index import IndexEntry, build_index
from .metadata import parse_header, strip_header, summarize_body
from .paths import DOCUMENT_SUFFIX, StoreLayout
from .protocol import StorageProtocol
from .scoring import rank, score
from .storage import LocalStorage
from .types import (
    Command,
    Document,
    FactDocument,
    InsightRecord,
    ProjectContext,
    SearchOptions,
    iso_timestamp,
)
from .writer import format_insight, insight_filename

logger = logging.getLogger(__name__)


class FactStore:
    """
    File-backed knowledge store.

    All reads and writes go through the injected storage. Operations are
    synchronous and unlocked; one writer at a time is assumed.
    """

    def __init__(
        self,
        config: FactsConfig,
        storage: Optional[StorageProtocol] = None,
    ):
        """
        Args:
            config: Root path, clock and defaults
            storage: Storage backend (default: LocalStorage)
        """
        self.config = config
        self.layout: StoreLayout = config.layout
        self.storage: StorageProtocol = storage if storage is not None else LocalStorage()

    @property
    def root(self) -> Path:
        return self.layout.root

    def _now_iso(self) -> str:
        return iso_timestamp(self.config.clock())

    # -------------------------------------------------------------------------
    # Collection scanning
    # -------------------------------------------------------------------------

    def _collection_files(self, directory: Path) -> list[Path]:
        if not self.storage.exists(directory):
            return []
        return [
            directory / name
            for name in self.storage.list(directory)
            if name.endswith(DOCUMENT_SUFFIX)
        ]

    def document_paths(self) -> list[Path]:
        """All document paths: solutions first, then docs."""
        paths: list[Path] = []
        for directory in self.layout.collections:
            paths.extend(self._collection_files(directory))
        return paths

    def _read_document(self, path: Path) -> Optional[Document]:
        """Read and parse one document; None (logged) if unreadable."""
        try:
            text = self.storage.read(path)
        except (StorageError, OSError) as e:
            logger.warning("Skipping unreadable document %s: %s", path, e)
            return None
        return Document(path=str(path), header=parse_header(text), body=strip_header(text))

    def documents(self) -> Iterator[Document]:
        """Iterate readable documents, skipping any that fail to read."""
        for path in self.document_paths():
            doc = self._read_document(path)
            if doc is not None:
                yield doc

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def commands(self) -> list[Command]:
        """Parse the commands file; empty if absent or unreadable."""
        path = self.layout.commands_file
        if not self.storage.exists(path):
            return []
        try:
            text = self.storage.read(path)
        except (StorageError, OSError) as e:
            logger.warning("Failed to read commands file %s: %s", path, e)
            return []
        return parse_commands(text)

    def _command_results(self, query: str) -> list[FactDocument]:
        matched = match_commands(self.commands(), query)
        if matched:
            logger.debug("Query %r matched %d project command(s)", query, len(matched))
        return [command_result(c, self.layout.commands_file) for c in matched]

    # -------------------------------------------------------------------------
    # Query Operations
    # -------------------------------------------------------------------------

    def search(
        self,
        query: str,
        options: Optional[SearchOptions] = None,
    ) -> list[FactDocument]:
        """
        Find documents relevant to a query.

        Matching project commands come first at score 1.0, followed by
        documents scoring at least ``options.min_relevance``, best first,
        at most ``options.max_results`` of them.

        Args:
            query: Search text
            options: Result limit, category filter and relevance threshold

        Returns:
            Command results then document results
        """
        options = options or SearchOptions()
        if not query or not query.strip():
            return []

        commands = self._command_results(query)
        if not self.storage.exists(self.root):
            return commands

        scored = []
        for doc in self.documents():
            if doc.category not in options.categories:
                continue
            relevance = score(query, doc.body, doc.header)
            scored.append(FactDocument(
                path=doc.path,
                title=doc.title or Path(doc.path).stem,
                category=doc.category.value,
                relevance_score=relevance,
                summary=summarize_body(doc.body),
                last_updated=doc.created_date,
            ))

        results = rank(scored, options)
        logger.debug("Search %r: %d command(s), %d document(s)", query, len(commands), len(results))
        return commands + results

    def get_context(self) -> ProjectContext:
        """
        Aggregate snapshot: document count, categories seen, latest date.

        ``last_activity`` falls back to the clock when no document carries
        a created_date.
        """
        current_path = str(self.config.project_path)
        if not self.storage.exists(self.root):
            return ProjectContext(
                current_path=current_path,
                has_local_docs=False,
                fact_count=0,
                categories=[],
                last_activity=self._now_iso(),
            )

        paths = self.document_paths()
        categories: list[str] = []
        last_activity = ""
        for path in paths:
            doc = self._read_document(path)
            if doc is None:
                continue
            category = doc.category.value
            if category not in categories:
                categories.append(category)
            if doc.created_date > last_activity:
                last_activity = doc.created_date

        return ProjectContext(
            current_path=current_path,
            has_local_docs=True,
            fact_count=len(paths),
            categories=categories,
            last_activity=last_activity or self._now_iso(),
        )

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def initialize(self) -> None:
        """Create root, solutions and docs directories. Safe to repeat."""
        self.storage.mkdir(self.root)
        for directory in self.layout.collections:
            self.storage.mkdir(directory)
        logger.info("Initialized facts store at %s", self.root)

    def record(self, insight: InsightRecord) -> Path:
        """
        Store an insight under solutions/ and regenerate the index.

        The insight is durable once written; a failed index rebuild is
        logged and does not fail the call.

        Returns:
            Path of the written document

        Raises:
            StorageError: If the document could not be written
        """
        filename = insight_filename(insight, unique=self.config.unique_filenames)
        path = self.layout.solutions / filename
        content = format_insight(insight, self.config.clock())

        try:
            self.storage.write(path, content)
        except StorageError as e:
            raise StorageError(f"Failed to record insight: {e}") from e
        logger.info("Recorded %s insight: %s", insight.category.value, path)

        try:
            self.rebuild_index()
        except StorageError as e:
            logger.warning("Failed to update knowledge index: %s", e)
        return path

    def _index_entries(self, directory: Path) -> list[IndexEntry]:
        entries = []
        for path in self._collection_files(directory):
            doc = self._read_document(path)
            if doc is None:
                continue
            entries.append(IndexEntry(
                name=path.name,
                summary=summarize_body(doc.body),
                created_date=doc.created_date,
            ))
        return entries

    def rebuild_index(self) -> Path:
        """
        Regenerate KNOWLEDGE.md from the current collection.

        Unreadable documents are left out; they never abort the rebuild.

        Returns:
            Path of the index document
        """
        content = build_index(
            self._index_entries(self.layout.solutions),
            self._index_entries(self.layout.docs),
            self.config.clock(),
        )
        self.storage.write(self.layout.knowledge_file, content)
        logger.debug("Rebuilt index %s", self.layout.knowledge_file)
        return self.layout.knowledge_file
