"""
Rendering of insights into stored documents.

Filenames are built from the task and solution text. Two insights whose
sanitized prefixes agree get the same filename and the later one replaces
the earlier, unless unique filenames are enabled.
"""

import hashlib
import re
from datetime import datetime

from .paths import DOCUMENT_SUFFIX
from .types import Confidence, InsightRecord, iso_date, iso_timestamp

# Everything except ASCII letters, digits and CJK ideographs
_FILENAME_STRIP_RE = re.compile(r"[^a-zA-Z0-9一-龥]")

FILENAME_PART_LENGTH = 30
NO_EVIDENCE = "- No additional evidence"

_CONFIDENCE_DESCRIPTIONS = {
    Confidence.HIGH: "thoroughly validated",
    Confidence.MEDIUM: "workable but context-dependent",
    Confidence.LOW: "experimental, needs further validation",
}


def sanitize_filename_part(text: str) -> str:
    return _FILENAME_STRIP_RE.sub("", text)[:FILENAME_PART_LENGTH]


def insight_hash(insight: InsightRecord) -> str:
    """Stable short hash of an insight's task and solution."""
    content = f"{insight.task}\n{insight.solution}"
    return hashlib.sha256(content.encode("utf-8")).hexdigest()[:8]


def insight_filename(insight: InsightRecord, unique: bool = False) -> str:
    """
    Filename for an insight: ``<task>_<solution>.md``.

    Args:
        insight: The insight being recorded
        unique: Append a hash of the full task and solution so that
            insights sharing a prefix do not overwrite each other

    Returns:
        Bare filename (no directory)
    """
    name = f"{sanitize_filename_part(insight.task)}_{sanitize_filename_part(insight.solution)}"
    if unique:
        name = f"{name}_{insight_hash(insight)}"
    return name + DOCUMENT_SUFFIX


def confidence_description(confidence) -> str:
    try:
        return _CONFIDENCE_DESCRIPTIONS.get(Confidence(confidence), "unassessed")
    except ValueError:
        return "unassessed"


def _header_list(values: list[str]) -> str:
    return "[" + ", ".join(_one_line(v) for v in values) + "]"


def _one_line(text: str) -> str:
    return " ".join(text.split())


def format_insight(insight: InsightRecord, now: datetime) -> str:
    """
    Render an insight as document text: header block then body sections.

    Args:
        insight: The insight to render
        now: Recording time, used for created_date and the footer
    """
    category = insight.category.value
    confidence = insight.confidence.value
    tags = [category] + [t for t in insight.tags if t != category]
    evidence = "\n".join(f"- {e}" for e in insight.evidence) or NO_EVIDENCE

    return f"""---
category: {category}
confidence: {confidence}
created_date: {iso_date(now)}
title: {_one_line(insight.task)}
tags: {_header_list(tags)}
related_files: {_header_list(insight.related_files)}
---

# {insight.task} - Solution Insight

## Problem
{insight.task}

## Solution
{insight.solution}

## Reasoning
{insight.reasoning}

## Evidence
{evidence}

## Verification
*To be completed: concrete results and metrics for this solution*

## Caveats
- **Confidence**: {confidence}
- **Applicability**: assess against the specific situation before reuse
- **Risks**: *to be completed*

## Reusability
**Similar problems**: *which related problems this approach also solves*
**Key pattern**: *the general principle that can be extracted*

---
*Recorded at: {iso_timestamp(now)}*
*Confidence: {confidence} - {confidence_description(insight.confidence)}*"""
