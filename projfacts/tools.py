"""
Tool operations exposed to agents: how_to_solve, record_insight,
init_facts_system.

Every operation returns an envelope::

    {"success": bool, "message": str, "data": dict | None, "timestamp": str}

and never raises. Validation happens before any storage access; failures
are logged with full tracebacks to the error log.
"""

import logging
import re
from pathlib import Path
from typing import Callable, Optional

from .api import FactStore
from .config import FactsConfig, load_config
from .errors import FactsError, ValidationError, log_exception
from .scaffold import scaffold_project
from .types import (
    Category,
    Confidence,
    InsightRecord,
    Priority,
    SearchOptions,
    iso_timestamp,
)
from .writer import insight_hash

logger = logging.getLogger(__name__)

AGENT_TYPE = "facts-manager"

# Keywords that push a problem up the complexity scale
_COMPLEXITY_KEYWORDS = {
    "complex": ("architecture", "system", "integration", "multiple", "distributed", "scalability"),
    "moderate": ("implement", "design", "optimize", "refactor", "connect"),
}

# Vocabulary for tags inferred from task and solution text
COMMON_TAGS = (
    "typescript", "javascript", "react", "node", "api", "database",
    "testing", "deployment", "security", "performance", "ui", "backend",
    "frontend", "architecture", "pattern", "bug-fix", "feature", "refactor",
)

_STOP_WORDS = frozenset({"this", "that", "with", "have", "will", "from", "they", "been", "were", "said"})
_KEYWORD_RE = re.compile(r"\b\w{4,}\b")
MAX_SEARCH_KEYWORDS = 10


def analyze_problem_complexity(problem: str, constraints: list[str]) -> str:
    """Classify a problem as simple, moderate or complex."""
    problem_lower = problem.lower()
    if len(constraints) > 3 or any(k in problem_lower for k in _COMPLEXITY_KEYWORDS["complex"]):
        return "complex"
    if len(constraints) > 1 or any(k in problem_lower for k in _COMPLEXITY_KEYWORDS["moderate"]):
        return "moderate"
    return "simple"


def extract_tags(task: str, solution: str) -> list[str]:
    text = f"{task} {solution}".lower()
    return [tag for tag in COMMON_TAGS if tag in text]


def extract_search_keywords(task: str, solution: str) -> list[str]:
    """Up to ten distinct words of four or more characters, stop words removed."""
    words = _KEYWORD_RE.findall(f"{task} {solution}".lower())
    unique = list(dict.fromkeys(w for w in words if w not in _STOP_WORDS))
    return unique[:MAX_SEARCH_KEYWORDS]


def _envelope(success: bool, message: str, data: Optional[dict], timestamp: str) -> dict:
    return {
        "success": success,
        "message": message,
        "data": data,
        "timestamp": timestamp,
    }


class FactsTools:
    """
    The three agent-facing operations over a FactStore.

    ``init_facts_system`` with a project path switches ``store`` to that
    project, so later calls operate on it.
    """

    def __init__(
        self,
        store: FactStore,
        store_factory: Optional[Callable[[Path], FactStore]] = None,
    ):
        """
        Args:
            store: Active store
            store_factory: Builds a store for another project path
                (default: load_config + FactStore with the active storage)
        """
        self.store = store
        self._store_factory = store_factory or self._default_store_factory

    def _default_store_factory(self, project_path: Path) -> FactStore:
        config = load_config(project_path, clock=self.store.config.clock)
        return FactStore(config, storage=self.store.storage)

    @property
    def config(self) -> FactsConfig:
        return self.store.config

    def _timestamp(self) -> str:
        return iso_timestamp(self.config.clock())

    def _failure(self, action: str, exc: Exception, timestamp: str) -> dict:
        log_exception(exc, context=action)
        logger.warning("%s failed: %s", action, exc)
        return _envelope(False, f"Failed to {action}: {exc}", None, timestamp)

    # -------------------------------------------------------------------------
    # how_to_solve
    # -------------------------------------------------------------------------

    def how_to_solve(
        self,
        problem: str,
        context: Optional[str] = None,
        constraints: Optional[list[str]] = None,
        priority: Optional[str] = None,
    ) -> dict:
        """Search project knowledge for a problem and package it for an agent."""
        timestamp = self._timestamp()
        try:
            priority_value = Priority.from_user(priority)
            if not isinstance(problem, str) or not problem.strip():
                raise ValidationError("problem must be a non-empty string")
            constraints = list(constraints or [])

            project_context = self.store.get_context()
            options = SearchOptions(
                max_results=self.config.solve_max_results,
                categories=[Category.from_user(c) for c in self.config.solve_categories],
                min_relevance=self.config.solve_min_relevance,
            )
            facts = self.store.search(problem, options)
            complexity = analyze_problem_complexity(problem, constraints)
        except (FactsError, ValueError, OSError) as e:
            return self._failure("analyze problem", e, timestamp)

        data = {
            "agent_type": AGENT_TYPE,
            "agent_prompt": f"agents/{AGENT_TYPE}.md",
            "context_data": {
                "original_problem": problem,
                "problem_context": context or "",
                "constraints": constraints,
                "priority": priority_value.value,
                "project_context": {
                    "current_path": project_context.current_path,
                    "has_local_docs": project_context.has_local_docs,
                    "available_categories": project_context.categories,
                },
                "relevant_facts": [f.to_dict() for f in facts],
                "analysis_metadata": {
                    "complexity_level": complexity,
                    "search_results_count": len(facts),
                    "timestamp": timestamp,
                },
            },
            "next_steps": [
                f"Use the {AGENT_TYPE} agent with the provided context",
                "Follow every project command listed first in relevant_facts",
                "Execute the recommended solution steps",
                "Call record_insight to capture what was learned",
            ],
        }
        return _envelope(
            True,
            f"Found {len(facts)} relevant insights for problem analysis",
            data,
            timestamp,
        )

    # -------------------------------------------------------------------------
    # record_insight
    # -------------------------------------------------------------------------

    def record_insight(
        self,
        task: str,
        solution: str,
        reasoning: str,
        category: str,
        evidence: Optional[list[str]] = None,
        confidence: Optional[str] = None,
        tags: Optional[list[str]] = None,
        related_files: Optional[list[str]] = None,
    ) -> dict:
        """Validate and store an insight, then report where it went."""
        timestamp = self._timestamp()
        try:
            tags = list(tags) if tags else extract_tags(task, solution)
            insight = InsightRecord(
                task=task,
                solution=solution,
                reasoning=reasoning,
                category=category,
                evidence=evidence or [],
                confidence=Confidence.from_user(confidence),
                tags=tags,
                related_files=related_files or [],
            )
            path = self.store.record(insight)
            project_context = self.store.get_context()
        except (FactsError, ValueError, OSError) as e:
            return self._failure("record insight", e, timestamp)

        data = {
            "insight_id": insight_hash(insight),
            "category": insight.category.value,
            "confidence": insight.confidence.value,
            "filename": path.name,
            "storage_location": str(path),
            "tags": insight.tags,
            "related_files": insight.related_files,
            "search_keywords": extract_search_keywords(task, solution),
            "total_facts": project_context.fact_count,
            "next_steps": [
                "Insight has been recorded in the local knowledge base",
                "Consider reviewing related insights for patterns",
                "Update project documentation if this is a significant learning",
            ],
        }
        return _envelope(
            True,
            f"Successfully recorded {insight.category.value} insight",
            data,
            timestamp,
        )

    # -------------------------------------------------------------------------
    # init_facts_system
    # -------------------------------------------------------------------------

    def init_facts_system(
        self,
        project_path: Optional[str] = None,
        enable_auto_capture: bool = True,
    ) -> dict:
        """Create the facts layout, templates and CLAUDE.md integration."""
        timestamp = self._timestamp()
        try:
            if project_path:
                target = Path(project_path).expanduser()
                if target != self.config.project_path:
                    self.store = self._store_factory(target)
            result = scaffold_project(self.store, enable_auto_capture=enable_auto_capture)
        except (FactsError, ValueError, OSError) as e:
            return self._failure("initialize facts system", e, timestamp)

        root = self.store.root
        data = {
            "project_path": str(self.config.project_path),
            "facts_root": str(root),
            "agents_installed": len([p for p in result.created if p.startswith("agents")]),
            "claude_md_updated": result.claude_md_updated,
            "auto_capture_enabled": enable_auto_capture,
            "created_files": result.created,
            "preserved_files": result.kept,
            "created_structure": {
                str(root): "Main facts storage directory",
                str(self.store.layout.knowledge_file): "Auto-maintained facts index",
                str(self.store.layout.commands_file): "Project-specific commands and requirements",
                str(self.store.layout.solutions): "Solved problems and solutions",
                str(self.store.layout.docs): "Excerpted reference materials",
                str(self.store.layout.templates): "Templates for consistent insight format",
            },
            "next_steps": [
                "Use how_to_solve before tackling any new problem",
                "Use record_insight after completing tasks to build knowledge",
                "Add mandatory project rules to USER_COMMAND.md",
                "Customize agent prompts in agents/ for this project",
            ],
        }
        return _envelope(True, "Facts system successfully initialized", data, timestamp)
