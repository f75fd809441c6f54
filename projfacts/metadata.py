"""
Header block parsing for stored documents.

A document may start with a header block::

    ---
    category: technical
    created_date: 2026-01-15
    tags: [auth, jwt]
    ---

Each line is split on its first colon, so values may themselves contain
colons (timestamps). Parsing never raises: a missing or unterminated block
yields the default header, and malformed lines are skipped.
"""

import re

HEADER_DELIMITER = "---"

# Opening delimiter at offset 0, lines, closing delimiter on its own line
_HEADER_RE = re.compile(r"\A---\r?\n(.*?)^---\r?$", re.DOTALL | re.MULTILINE)

# Same block plus the line break after it, for stripping
_HEADER_STRIP_RE = re.compile(r"\A---\r?\n.*?^---\r?(?:\n|\Z)", re.DOTALL | re.MULTILINE)

SUMMARY_MIN_LENGTH = 50
SUMMARY_MAX_LENGTH = 200
NO_SUMMARY = "No summary available"


def default_header() -> dict[str, str]:
    """Header assumed for a document without a header block."""
    return {"category": "technical", "created_date": "", "title": ""}


def parse_header(text: str) -> dict[str, str]:
    """
    Extract the key/value header from document text.

    Args:
        text: Raw document text

    Returns:
        Mapping of trimmed keys to trimmed values, or the default header
        when the text has no header block.
    """
    match = _HEADER_RE.match(text)
    if not match:
        return default_header()

    header: dict[str, str] = {}
    for line in match.group(1).splitlines():
        key, sep, value = line.partition(":")
        key = key.strip()
        if not sep or not key:
            continue
        header[key] = value.strip()
    return header


def strip_header(text: str) -> str:
    """Return the body: text with any leading header block removed."""
    return _HEADER_STRIP_RE.sub("", text, count=1)


def header_tags(header: dict[str, str]) -> list[str]:
    """
    Tags from a header as a list.

    ``[a, b]`` inline lists are split on commas; any other value is a
    single tag.
    """
    raw = header.get("tags")
    if raw is None:
        return []
    raw = raw.strip()
    if raw.startswith("[") and raw.endswith("]"):
        return [t.strip().strip("'\"") for t in raw[1:-1].split(",") if t.strip()]
    return [raw] if raw else []


def extract_summary(text: str) -> str:
    """One-line summary of a whole document, header included."""
    return summarize_body(strip_header(text))


def summarize_body(body: str) -> str:
    """
    One-line summary of a document body.

    First line longer than 50 characters that is not a heading, cut at
    200 characters.
    """
    for line in body.splitlines():
        line = line.strip()
        if len(line) > SUMMARY_MIN_LENGTH and not line.startswith("#"):
            if len(line) > SUMMARY_MAX_LENGTH:
                return line[:SUMMARY_MAX_LENGTH] + "..."
            return line
    return NO_SUMMARY
