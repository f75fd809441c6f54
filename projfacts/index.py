"""
The navigational index (KNOWLEDGE.md).

Regenerated from scratch after every recorded insight: counts, a one-line
summary per document, and technology keyword frequencies taken from
filenames.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Iterable

from .types import iso_timestamp

# Matched case-insensitively as substrings of filenames
TECH_TERMS = (
    "React", "Vue", "Angular", "Node.js", "TypeScript", "JavaScript", "Python", "Java", "Go", "Rust",
    "Docker", "Kubernetes", "AWS", "Azure", "GCP", "MySQL", "PostgreSQL", "MongoDB", "Redis",
    "GraphQL", "REST", "API", "JWT", "认证", "性能", "优化", "架构", "设计", "测试", "部署",
    "数据库", "缓存", "网络", "安全", "监控", "日志", "CI/CD", "DevOps",
)

NO_SOLUTIONS = "*No solutions yet - record your first solved problem!*"
NO_DOCS = "*No reference excerpts yet - start collecting authoritative material!*"
NO_KEYWORDS = "No keywords yet"


@dataclass
class IndexEntry:
    """One document as listed in the index."""
    name: str
    summary: str
    created_date: str = ""


def sort_entries(entries: Iterable[IndexEntry]) -> list[IndexEntry]:
    """Newest first by created_date; undated last; ties by name."""
    ordered = sorted(entries, key=lambda e: e.name)
    return sorted(ordered, key=lambda e: e.created_date or "", reverse=True)


def extract_tech_keywords(filenames: Iterable[str]) -> list[tuple[str, int]]:
    """
    Count, per known term, the filenames that mention it.

    Returns:
        (term, count) pairs in term-list order, only for terms seen
    """
    names = [name.lower() for name in filenames]
    counts = []
    for term in TECH_TERMS:
        needle = term.lower()
        count = sum(1 for name in names if needle in name)
        if count:
            counts.append((term, count))
    return counts


def _entry_line(entry: IndexEntry) -> str:
    dated = f" (created: {entry.created_date})" if entry.created_date else ""
    return f"- `{entry.name}` - {entry.summary}{dated}"


def build_index(
    solutions: list[IndexEntry],
    docs: list[IndexEntry],
    now: datetime,
) -> str:
    """
    Render the index document.

    Args:
        solutions: Entries for the solutions collection
        docs: Entries for the docs collection
        now: Generation time
    """
    timestamp = iso_timestamp(now)
    solutions = sort_entries(solutions)
    docs = sort_entries(docs)
    keywords = extract_tech_keywords([e.name for e in solutions + docs])

    solution_lines = "\n".join(_entry_line(e) for e in solutions) or NO_SOLUTIONS
    doc_lines = "\n".join(_entry_line(e) for e in docs) or NO_DOCS
    keyword_line = " ".join(f"{term}({count})" for term, count in keywords) or NO_KEYWORDS
    footer_time = timestamp.replace("T", " ").split(".")[0]

    return f"""---
auto_generated: true
last_updated: {timestamp}
total_solutions: {len(solutions)}
total_docs: {len(docs)}
total_documents: {len(solutions) + len(docs)}
---

# Facts Knowledge Base

> Check this index for existing knowledge before starting any task.

## Solutions (problems solved) - {len(solutions)} total

{solution_lines}

## Docs (reference excerpts) - {len(docs)} total

{doc_lines}

## Technology keywords

{keyword_line}

## Usage

### Before a new task
1. Call `how_to_solve "your problem"` to look up related experience
2. Review the returned insights and project commands
3. Start from the suggested approach

### After finishing a task
1. Call `record_insight` to capture the solution and its reasoning
2. This index is regenerated automatically
3. Future searches will surface what you recorded

---
*Index regenerated at: {footer_time}*"""
