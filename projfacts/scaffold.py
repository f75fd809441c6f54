"""
Project scaffolding: bundled templates and the files written at init.

Templates are .md files in ``projfacts/data``. Files a user may have
edited (USER_COMMAND.md, the agent prompt, CLAUDE.md) are never
overwritten; CLAUDE.md only gets the integration section appended once.
"""

import importlib.resources
import logging
from dataclasses import dataclass, field
from pathlib import Path

from .api import FactStore
from .types import iso_date

logger = logging.getLogger(__name__)

INTEGRATION_MARKER = "Project Facts Management Integration"
AGENT_FILES = {"facts-manager.md": "facts_manager_agent.md"}


def load_template(name: str) -> str:
    """Read a bundled template from projfacts/data."""
    return importlib.resources.files("projfacts.data").joinpath(name).read_text(encoding="utf-8")


def user_command_template(date: str) -> str:
    return load_template("user_command.md").replace("{date}", date)


def claude_integration(enable_auto_capture: bool) -> str:
    auto_capture = load_template("auto_capture.md") if enable_auto_capture else ""
    return load_template("claude_integration.md").replace("{auto_capture}", auto_capture)


def merge_claude_md(existing: str, section: str) -> str:
    """Append the integration section unless it is already there."""
    if INTEGRATION_MARKER in existing:
        return existing
    return existing + "\n\n" + section


@dataclass
class ScaffoldResult:
    """What scaffold_project touched, as paths relative to the project."""
    created: list[str] = field(default_factory=list)
    kept: list[str] = field(default_factory=list)
    claude_md_updated: bool = False


def scaffold_project(store: FactStore, enable_auto_capture: bool = True) -> ScaffoldResult:
    """
    Lay down the facts directory structure and its companion files.

    Args:
        store: Store whose root and project path receive the files
        enable_auto_capture: Include the reminder section in CLAUDE.md

    Returns:
        ScaffoldResult listing created and preserved files
    """
    storage = store.storage
    layout = store.layout
    project = store.config.project_path
    result = ScaffoldResult()

    def rel(path: Path) -> str:
        try:
            return str(path.relative_to(project))
        except ValueError:
            return str(path)

    def write_once(path: Path, content: str) -> None:
        if storage.exists(path):
            result.kept.append(rel(path))
            return
        storage.write(path, content)
        result.created.append(rel(path))

    store.initialize()
    today = iso_date(store.config.clock())

    write_once(layout.commands_file, user_command_template(today))
    write_once(layout.insight_template, load_template("insight_template.md"))

    agents_dir = project / "agents"
    storage.mkdir(agents_dir)
    for filename, template in AGENT_FILES.items():
        write_once(agents_dir / filename, load_template(template))

    claude_md = project / "CLAUDE.md"
    section = claude_integration(enable_auto_capture)
    if storage.exists(claude_md):
        existing = storage.read(claude_md)
        merged = merge_claude_md(existing, section)
        if merged != existing:
            storage.write(claude_md, merged)
            result.claude_md_updated = True
    else:
        storage.write(claude_md, section)
        result.claude_md_updated = True

    store.rebuild_index()
    logger.info(
        "Scaffolded %s: created %d file(s), kept %d",
        project, len(result.created), len(result.kept),
    )
    return result
