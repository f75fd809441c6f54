"""
Data types for the facts store.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from .errors import ValidationError


# Category reported for synthetic results built from project commands
COMMAND_CATEGORY = "command"


def utc_now() -> datetime:
    """Default clock: current time, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def iso_timestamp(dt: datetime) -> str:
    """Render a datetime as ISO 8601 with millisecond precision and a Z suffix."""
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.isoformat(timespec="milliseconds") + "Z"


def iso_date(dt: datetime) -> str:
    """YYYY-MM-DD for a datetime (UTC)."""
    return iso_timestamp(dt)[:10]


class Category(str, Enum):
    """Insight category.

    UNKNOWN is only produced when a stored header carries a value outside
    the recognized set. Callers can never supply it.
    """
    TECHNICAL = "technical"
    PROCESS = "process"
    DECISION = "decision"
    PATTERN = "pattern"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Optional[str]) -> "Category":
        """Lenient parse for stored headers: missing → TECHNICAL, unrecognized → UNKNOWN."""
        if not value:
            return cls.TECHNICAL
        try:
            category = cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN
        return category

    @classmethod
    def from_user(cls, value: "str | Category") -> "Category":
        """Strict parse for caller input."""
        if isinstance(value, Category) and value is not cls.UNKNOWN:
            return value
        if isinstance(value, str) and value in USER_CATEGORIES:
            return cls(value)
        raise ValidationError(
            f"Invalid category: {value!r} (expected one of: {', '.join(USER_CATEGORIES)})"
        )


USER_CATEGORIES = ("technical", "process", "decision", "pattern")

# Characters that delimit inline header lists
_LIST_DELIMITERS = frozenset(",[]")


def header_list_values(name: str, values) -> list[str]:
    """
    Normalize values stored in an inline header list.

    Whitespace runs (newlines included) collapse to one space and empty
    values are dropped.

    Raises:
        ValidationError: If a value contains a list delimiter
    """
    cleaned = []
    for value in values or []:
        value = " ".join(str(value).split())
        if not value:
            continue
        if any(c in _LIST_DELIMITERS for c in value):
            raise ValidationError(
                f"Insight {name} may not contain ',', '[' or ']': {value!r}"
            )
        cleaned.append(value)
    return cleaned


class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_user(cls, value: "str | Confidence | None") -> "Confidence":
        if value is None:
            return cls.MEDIUM
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Invalid confidence: {value!r} (expected one of: high, medium, low)"
            ) from None


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @classmethod
    def from_user(cls, value: "str | Priority | None") -> "Priority":
        if value is None:
            return cls.MEDIUM
        try:
            return cls(value)
        except ValueError:
            raise ValidationError(
                f"Invalid priority: {value!r} (expected one of: high, medium, low)"
            ) from None


@dataclass
class InsightRecord:
    """
    A structured record of a solved problem, as supplied for recording.

    ``category`` is required and drives both the stored header and the
    filename. ``tags`` and ``related_files`` are written to the header.
    """
    task: str
    solution: str
    reasoning: str
    category: Category
    evidence: list[str] = field(default_factory=list)
    confidence: Confidence = Confidence.MEDIUM
    tags: list[str] = field(default_factory=list)
    related_files: list[str] = field(default_factory=list)

    def __post_init__(self):
        self.category = Category.from_user(self.category)
        self.confidence = Confidence.from_user(self.confidence)
        for name in ("task", "solution"):
            value = getattr(self, name)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"Insight {name} must be a non-empty string")
        self.evidence = list(self.evidence or [])
        self.tags = header_list_values("tags", self.tags)
        self.related_files = header_list_values("related_files", self.related_files)


@dataclass
class Document:
    """A stored insight or excerpt, with its parsed header and body."""
    path: str
    header: dict[str, str]
    body: str

    @property
    def category(self) -> Category:
        return Category.parse(self.header.get("category"))

    @property
    def title(self) -> str:
        return self.header.get("title", "")

    @property
    def created_date(self) -> str:
        return self.header.get("created_date", "")


@dataclass
class Command:
    """A mandatory project directive parsed from the commands file."""
    name: str
    description: str
    last_updated: str = ""
    related_docs: list[str] = field(default_factory=list)


@dataclass
class FactDocument:
    """
    A search result.

    Derived from a Document (scored) or a Command (always 1.0); never stored.
    """
    path: str
    title: str
    category: str
    relevance_score: float
    summary: str
    last_updated: str = ""
    related_docs: Optional[list[str]] = None

    def to_dict(self) -> dict:
        d = {
            "path": self.path,
            "title": self.title,
            "category": self.category,
            "relevance_score": self.relevance_score,
            "summary": self.summary,
            "last_updated": self.last_updated,
        }
        if self.related_docs is not None:
            d["related_docs"] = list(self.related_docs)
        return d


@dataclass
class SearchOptions:
    max_results: int = 10
    categories: list[Category] = field(
        default_factory=lambda: [Category(c) for c in USER_CATEGORIES]
    )
    min_relevance: float = 0.5

    def __post_init__(self):
        self.categories = [Category.from_user(c) for c in self.categories]
        if self.max_results < 0:
            raise ValidationError(f"max_results must be >= 0: {self.max_results}")


@dataclass
class ProjectContext:
    """Aggregate snapshot of the collection."""
    current_path: str
    has_local_docs: bool
    fact_count: int
    categories: list[str]
    last_activity: str

    def to_dict(self) -> dict:
        return {
            "current_path": self.current_path,
            "has_local_docs": self.has_local_docs,
            "fact_count": self.fact_count,
            "categories": list(self.categories),
            "last_activity": self.last_activity,
        }
