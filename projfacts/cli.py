"""
CLI interface for the facts store.

Usage:
    proj-facts init
    proj-facts solve "how do I add a dependency"
    proj-facts search "login"
    proj-facts record --task "..." --solution "..." --reasoning "..." --category technical
"""

import json
import os
from pathlib import Path
from typing import Optional

import typer
from typing_extensions import Annotated

from .api import FactStore
from .config import load_config, save_config
from .errors import FactsError, log_exception
from .logging_config import configure_ops_log, configure_quiet_mode, enable_debug_mode
from .paths import get_tool_directory
from .tools import FactsTools
from .types import USER_CATEGORIES, Category, SearchOptions


# Configure quiet mode by default
# Set FACTS_VERBOSE=1 to enable debug mode via environment
if os.environ.get("FACTS_VERBOSE") == "1":
    enable_debug_mode()
else:
    configure_quiet_mode(quiet=True)


def _version_callback(value: bool):
    if value:
        from importlib.metadata import version
        print(f"proj-facts {version('proj-facts')}")
        raise typer.Exit()


def _verbose_callback(value: bool):
    if value:
        enable_debug_mode()


# Global state for CLI options
_json_output = False
_project_override: Optional[Path] = None
_root_override: Optional[Path] = None


def _json_callback(value: bool):
    global _json_output
    _json_output = value


def _get_json_output() -> bool:
    return _json_output


def _project_callback(value: Optional[Path]):
    global _project_override
    _project_override = value


def _root_callback(value: Optional[Path]):
    global _root_override
    _root_override = value


app = typer.Typer(
    name="proj-facts",
    help="Project knowledge base: record solved problems, look them up later.",
    no_args_is_help=True,
    rich_markup_mode=None,
)


@app.callback()
def main_callback(
    verbose: Annotated[bool, typer.Option(
        "--verbose", "-v",
        help="Enable debug-level logging to stderr",
        callback=_verbose_callback,
        is_eager=True,
    )] = False,
    output_json: Annotated[bool, typer.Option(
        "--json", "-j",
        help="Output as JSON",
        callback=_json_callback,
        is_eager=True,
    )] = False,
    version: Annotated[Optional[bool], typer.Option(
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    )] = None,
    project: Annotated[Optional[Path], typer.Option(
        "--project", "-p",
        envvar="FACTS_PROJECT_PATH",
        help="Project directory (default: current directory)",
        callback=_project_callback,
        is_eager=True,
    )] = None,
    root: Annotated[Optional[Path], typer.Option(
        "--root",
        envvar="FACTS_ROOT",
        help="Facts root directory (default: <project>/.bkproj/facts)",
        callback=_root_callback,
        is_eager=True,
    )] = None,
):
    """Project knowledge base: record solved problems, look them up later."""
    pass


def _get_store() -> FactStore:
    """Build a store from the global options; exit cleanly on bad config."""
    try:
        config = load_config(_project_override, root=_root_override)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    return FactStore(config)


def _echo_envelope(result: dict) -> None:
    """Print a tool envelope and exit non-zero on failure."""
    if _get_json_output():
        typer.echo(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        typer.echo(result["message"], err=not result["success"])
    if not result["success"]:
        raise typer.Exit(1)


@app.command()
def init(
    no_auto_capture: Annotated[bool, typer.Option(
        "--no-auto-capture",
        help="Leave the reminder section out of CLAUDE.md",
    )] = False,
    write_config: Annotated[bool, typer.Option(
        "--write-config",
        help="Also write facts.toml with the current settings",
    )] = False,
):
    """Initialize the facts system in the project."""
    store = _get_store()
    tools = FactsTools(store)
    result = tools.init_facts_system(enable_auto_capture=not no_auto_capture)
    if result["success"] and write_config:
        save_config(store.config)
    _echo_envelope(result)
    if result["success"] and not _get_json_output():
        for path in result["data"]["created_files"]:
            typer.echo(f"  created  {path}")
        for path in result["data"]["preserved_files"]:
            typer.echo(f"  kept     {path}")


@app.command()
def solve(
    problem: Annotated[str, typer.Argument(help="The problem or task to solve")],
    context: Annotated[Optional[str], typer.Option(
        "--context", "-c", help="Additional context",
    )] = None,
    constraint: Annotated[Optional[list[str]], typer.Option(
        "--constraint", help="Constraint (repeatable)",
    )] = None,
    priority: Annotated[str, typer.Option(
        "--priority", help="high, medium or low",
    )] = "medium",
):
    """Look up project commands and related insights for a problem."""
    tools = FactsTools(_get_store())
    result = tools.how_to_solve(problem, context=context, constraints=constraint, priority=priority)
    _echo_envelope(result)
    if result["success"] and not _get_json_output():
        for fact in result["data"]["context_data"]["relevant_facts"]:
            typer.echo(f"  {fact['relevance_score']:.2f}  {fact['title']}  {fact['path']}")


@app.command()
def search(
    query: Annotated[str, typer.Argument(help="Search query text")],
    limit: Annotated[int, typer.Option(
        "--limit", "-n", help="Maximum scored results",
    )] = 10,
    min_relevance: Annotated[float, typer.Option(
        "--min-relevance", help="Minimum relevance score (0-1)",
    )] = 0.5,
    category: Annotated[Optional[list[str]], typer.Option(
        "--category", help=f"Restrict to category (repeatable): {', '.join(USER_CATEGORIES)}",
    )] = None,
):
    """Search recorded insights; matching project commands come first."""
    store = _get_store()
    try:
        options = SearchOptions(
            max_results=limit,
            categories=[Category.from_user(c) for c in (category or USER_CATEGORIES)],
            min_relevance=min_relevance,
        )
        results = store.search(query, options)
    except FactsError as e:
        log_exception(e, context="search")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if _get_json_output():
        typer.echo(json.dumps([r.to_dict() for r in results], indent=2, ensure_ascii=False))
        return
    if not results:
        typer.echo("No results found.")
        return
    for r in results:
        typer.echo(f"{r.relevance_score:.2f}  [{r.category}] {r.title}")
        typer.echo(f"      {r.summary}")
        typer.echo(f"      {r.path}")


@app.command()
def record(
    task: Annotated[str, typer.Option("--task", help="The task or problem that was solved")],
    solution: Annotated[str, typer.Option("--solution", help="The solution that was used")],
    reasoning: Annotated[str, typer.Option("--reasoning", help="Why this solution works")],
    category: Annotated[str, typer.Option(
        "--category", help=f"One of: {', '.join(USER_CATEGORIES)}",
    )],
    evidence: Annotated[Optional[list[str]], typer.Option(
        "--evidence", help="Supporting evidence (repeatable)",
    )] = None,
    confidence: Annotated[str, typer.Option(
        "--confidence", help="high, medium or low",
    )] = "medium",
    tag: Annotated[Optional[list[str]], typer.Option(
        "--tag", "-t", help="Tag (repeatable)",
    )] = None,
    related_file: Annotated[Optional[list[str]], typer.Option(
        "--file", help="Related file (repeatable)",
    )] = None,
):
    """Record an insight from a completed task."""
    tools = FactsTools(_get_store())
    result = tools.record_insight(
        task, solution, reasoning, category,
        evidence=evidence, confidence=confidence,
        tags=tag, related_files=related_file,
    )
    _echo_envelope(result)
    if result["success"] and not _get_json_output():
        typer.echo(f"  {result['data']['storage_location']}")


@app.command()
def context():
    """Show a summary of the knowledge base."""
    store = _get_store()
    try:
        ctx = store.get_context()
    except FactsError as e:
        log_exception(e, context="context")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)

    if _get_json_output():
        typer.echo(json.dumps(ctx.to_dict(), indent=2, ensure_ascii=False))
        return
    if not ctx.has_local_docs:
        typer.echo(f"No facts store at {store.root} (run: proj-facts init)")
        return
    typer.echo(f"Root:          {store.root}")
    typer.echo(f"Documents:     {ctx.fact_count}")
    typer.echo(f"Categories:    {', '.join(ctx.categories) or '-'}")
    typer.echo(f"Last activity: {ctx.last_activity}")


@app.command()
def reindex():
    """Regenerate KNOWLEDGE.md from the current documents."""
    store = _get_store()
    try:
        path = store.rebuild_index()
    except FactsError as e:
        log_exception(e, context="reindex")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    typer.echo(f"Rebuilt {path}")


@app.command("mcp")
def mcp_server():
    """Run the MCP stdio server."""
    configure_ops_log(get_tool_directory())
    from . import mcp as mcp_mod
    mcp_mod._tools = FactsTools(_get_store())
    mcp_mod.main()


def main():
    """Entry point for the proj-facts console script."""
    try:
        app()
    except KeyboardInterrupt:
        raise SystemExit(130)


if __name__ == "__main__":
    main()
