"""
MCP stdio server for proj-facts: project knowledge tools for AI agents.

Exposes the facts tool layer as MCP tools so local agents (Claude Code,
etc.) can look up and record project knowledge.

Usage:
    proj-facts mcp                                   # stdio server (via CLI)
    claude mcp add proj-facts -- proj-facts mcp      # Claude Code integration

All store calls are serialized through a single asyncio.Lock.
"""

import asyncio
import json
import logging
from typing import Annotated, Literal, Optional

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from .api import FactStore
from .config import load_config
from .tools import FactsTools

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Server setup
# ---------------------------------------------------------------------------

mcp = FastMCP(
    "proj-facts",
    instructions=(
        "Project knowledge base. Call how_to_solve before starting a task to "
        "see mandatory project commands and related past solutions. Call "
        "record_insight after finishing a task to capture what was learned."
    ),
)

_tools: Optional[FactsTools] = None
_lock = asyncio.Lock()


def _get_tools() -> FactsTools:
    """Lazy-init the tool layer (respects FACTS_PROJECT_PATH / FACTS_ROOT).

    Must be called inside ``async with _lock``.
    """
    global _tools
    if _tools is None:
        _tools = FactsTools(FactStore(load_config()))
    return _tools


def _render(result: dict) -> str:
    return json.dumps(result, indent=2, ensure_ascii=False)


# ---------------------------------------------------------------------------
# Tool annotations
# ---------------------------------------------------------------------------

_READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False)
_IDEMPOTENT = ToolAnnotations(idempotentHint=True, destructiveHint=False)
_WRITE = ToolAnnotations(destructiveHint=False, idempotentHint=False)


# ---------------------------------------------------------------------------
# Tools
# ---------------------------------------------------------------------------


@mcp.tool(
    description=(
        "Analyze a problem and provide guidance on solution approaches based on "
        "project knowledge. Mandatory project commands are listed first."
    ),
    annotations=_READ_ONLY,
)
async def how_to_solve(
    problem: Annotated[str, Field(
        description="The problem or task to solve.",
    )],
    context: Annotated[Optional[str], Field(
        description="Additional context about the current situation.",
    )] = None,
    constraints: Annotated[Optional[list[str]], Field(
        description="Any constraints or limitations.",
    )] = None,
    priority: Annotated[Literal["high", "medium", "low"], Field(
        description="Priority of the problem.",
    )] = "medium",
) -> str:
    """Look up project knowledge for a problem."""
    async with _lock:
        tools = _get_tools()
        result = tools.how_to_solve(
            problem, context=context, constraints=constraints, priority=priority,
        )
    return _render(result)


@mcp.tool(
    description=(
        "Record insights, solutions, and learnings from completed tasks for "
        "future reference."
    ),
    annotations=_WRITE,
)
async def record_insight(
    task: Annotated[str, Field(
        description="The task or problem that was solved.",
    )],
    solution: Annotated[str, Field(
        description="The solution or approach that was used.",
    )],
    reasoning: Annotated[str, Field(
        description="Why this solution was chosen and how it works.",
    )],
    category: Annotated[Literal["technical", "process", "decision", "pattern"], Field(
        description="Category of the insight.",
    )],
    evidence: Annotated[Optional[list[str]], Field(
        description="Supporting evidence, references, or validation.",
    )] = None,
    confidence: Annotated[Literal["high", "medium", "low"], Field(
        description="Confidence level in this solution.",
    )] = "medium",
    tags: Annotated[Optional[list[str]], Field(
        description="Tags for better categorization and search.",
    )] = None,
    related_files: Annotated[Optional[list[str]], Field(
        description="Files that were created or modified.",
    )] = None,
) -> str:
    """Record an insight."""
    async with _lock:
        tools = _get_tools()
        result = tools.record_insight(
            task, solution, reasoning, category,
            evidence=evidence, confidence=confidence,
            tags=tags, related_files=related_files,
        )
    return _render(result)


@mcp.tool(
    description=(
        "Initialize the local facts system: directory structure, command and "
        "insight templates, agent prompt, and CLAUDE.md integration."
    ),
    annotations=_IDEMPOTENT,
)
async def init_facts_system(
    project_path: Annotated[Optional[str], Field(
        description="Path to initialize the facts system (defaults to current directory).",
    )] = None,
    enable_auto_capture: Annotated[bool, Field(
        description="Whether to enable automatic insight capture reminders in CLAUDE.md.",
    )] = True,
) -> str:
    """Initialize the facts system."""
    async with _lock:
        tools = _get_tools()
        result = tools.init_facts_system(
            project_path=project_path, enable_auto_capture=enable_auto_capture,
        )
    return _render(result)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main():
    """Run the MCP stdio server."""
    import os
    import signal
    # The stdin reader thread shields readline from cancellation, so the
    # first Ctrl+C would otherwise hang; exit immediately instead.
    signal.signal(signal.SIGINT, lambda *_: os._exit(130))

    logger.info("Starting proj-facts MCP server")
    mcp.run(transport="stdio")


if __name__ == "__main__":
    main()
