"""
Project commands: mandatory directives that outrank every search result.

Commands live in one markdown file, one ``## name`` section each::

    ## Package Manager

    **Description**: must use pnpm, never npm or yarn
    **Related Docs**: docs/pnpm.md, docs/ci.md
    **Last Updated**: 2026-01-15

    Free-form details...

Labels are recognized in English and Chinese. Without a Description label,
the first plain line of the section is used.
"""

import logging
import re
from pathlib import Path
from typing import Iterable

from .types import COMMAND_CATEGORY, Command, FactDocument

logger = logging.getLogger(__name__)

COMMAND_SCORE = 1.0
COMMAND_TITLE_PREFIX = "Project command: "

_SECTION_RE = re.compile(r"^## ", re.MULTILINE)


def _label_re(*labels: str) -> re.Pattern:
    names = "|".join(re.escape(label) for label in labels)
    return re.compile(
        rf"^(?:\*\*)?(?:{names})(?:\*\*)?\s*[:：](?:\*\*)?\s*(.*)$",
        re.IGNORECASE,
    )


_DESCRIPTION_RE = _label_re("description", "描述")
_RELATED_DOCS_RE = _label_re("related docs", "相关文档")
_LAST_UPDATED_RE = _label_re("last updated", "更新时间")


def _parse_section(section: str) -> Command | None:
    lines = section.split("\n")
    name = lines[0].strip()

    description = ""
    related_docs: list[str] = []
    last_updated = ""

    for raw in lines[1:]:
        line = raw.strip()
        if not line:
            continue
        desc_match = _DESCRIPTION_RE.match(line)
        docs_match = _RELATED_DOCS_RE.match(line)
        updated_match = _LAST_UPDATED_RE.match(line)
        if desc_match:
            description = desc_match.group(1).strip()
        elif docs_match:
            related_docs = [d.strip() for d in docs_match.group(1).split(",") if d.strip()]
        elif updated_match:
            last_updated = updated_match.group(1).strip()
        elif not line.startswith("**") and not description:
            description = line

    if not name or not description:
        return None
    return Command(
        name=name,
        description=description,
        last_updated=last_updated,
        related_docs=related_docs,
    )


def parse_commands(text: str) -> list[Command]:
    """
    Parse the commands file into Commands, in file order.

    Text before the first ``## `` heading is ignored. Sections without a
    name or a description are dropped.
    """
    sections = _SECTION_RE.split(text)[1:]
    commands = []
    for section in sections:
        command = _parse_section(section)
        if command is None:
            logger.debug("Skipping command section without name/description: %r", section[:40])
            continue
        commands.append(command)
    return commands


def command_matches(command: Command, query: str) -> bool:
    """True if any query token occurs in the command name or description."""
    name = command.name.lower()
    description = command.description.lower()
    return any(word in name or word in description for word in query.lower().split())


def match_commands(commands: Iterable[Command], query: str) -> list[Command]:
    return [c for c in commands if command_matches(c, query)]


def command_result(command: Command, path: Path) -> FactDocument:
    """Search result for a matched command, at maximum relevance."""
    return FactDocument(
        path=str(path),
        title=f"{COMMAND_TITLE_PREFIX}{command.name}",
        category=COMMAND_CATEGORY,
        relevance_score=COMMAND_SCORE,
        summary=command.description,
        last_updated=command.last_updated,
        related_docs=list(command.related_docs),
    )
