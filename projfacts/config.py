"""
Configuration for a facts store.

Everything the store needs from its environment (root path, clock, search
defaults) arrives through a FactsConfig. An optional TOML file in the facts
root overrides the defaults.
"""

import os
import tomllib
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import tomli_w

from .paths import StoreLayout
from .types import Category, utc_now


CONFIG_FILENAME = "facts.toml"
CONFIG_VERSION = 1

# Categories consulted by how_to_solve (decision records are excluded)
DEFAULT_SOLVE_CATEGORIES = ("technical", "process", "pattern")


@dataclass
class FactsConfig:
    """Complete store configuration."""
    project_path: Path
    root: Optional[Path] = None
    clock: Callable[[], datetime] = utc_now
    version: int = CONFIG_VERSION

    # Append a content hash to insight filenames
    unique_filenames: bool = False

    # how_to_solve search parameters
    solve_max_results: int = 10
    solve_min_relevance: float = 0.6
    solve_categories: list[str] = field(default_factory=lambda: list(DEFAULT_SOLVE_CATEGORIES))

    def __post_init__(self):
        self.project_path = Path(self.project_path)
        if self.root is None:
            self.root = StoreLayout.for_project(self.project_path).root
        else:
            self.root = Path(self.root)
        self.solve_categories = [Category.from_user(c).value for c in self.solve_categories]

    @property
    def layout(self) -> StoreLayout:
        return StoreLayout(self.root)

    @property
    def config_path(self) -> Path:
        """Path to the TOML config file."""
        return self.root / CONFIG_FILENAME

    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()


def resolve_project_path(project_path: Optional[Path] = None) -> Path:
    """Explicit path, else FACTS_PROJECT_PATH, else the working directory."""
    if project_path is not None:
        return Path(project_path).expanduser()
    env_path = os.environ.get("FACTS_PROJECT_PATH")
    if env_path:
        return Path(env_path).expanduser()
    return Path.cwd()


def load_config(
    project_path: Optional[Path] = None,
    root: Optional[Path] = None,
    clock: Callable[[], datetime] = utc_now,
) -> FactsConfig:
    """
    Build configuration for a project, reading facts.toml if present.

    The root comes from the argument, then FACTS_ROOT, then the default
    layout under the project.

    Raises:
        ValueError: If the config file is invalid
    """
    project = resolve_project_path(project_path)
    if root is None and os.environ.get("FACTS_ROOT"):
        root = Path(os.environ["FACTS_ROOT"]).expanduser()
    config = FactsConfig(project_path=project, root=root, clock=clock)

    if not config.exists():
        return config

    with open(config.config_path, "rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid config {config.config_path}: {e}") from e

    version = data.get("store", {}).get("version", 1)
    if version > CONFIG_VERSION:
        raise ValueError(f"Config version {version} is newer than supported ({CONFIG_VERSION})")

    store = data.get("store", {})
    solve = data.get("how_to_solve", {})
    config.version = version
    config.unique_filenames = bool(store.get("unique_filenames", config.unique_filenames))
    config.solve_max_results = int(solve.get("max_results", config.solve_max_results))
    config.solve_min_relevance = float(solve.get("min_relevance", config.solve_min_relevance))
    categories = solve.get("categories", config.solve_categories)
    config.solve_categories = [Category.from_user(c).value for c in categories]
    return config


def save_config(config: FactsConfig) -> None:
    """
    Save configuration to the facts root.

    Creates the directory if it doesn't exist.
    """
    config.root.mkdir(parents=True, exist_ok=True)

    data = {
        "store": {
            "version": config.version,
            "unique_filenames": config.unique_filenames,
        },
        "how_to_solve": {
            "max_results": config.solve_max_results,
            "min_relevance": config.solve_min_relevance,
            "categories": list(config.solve_categories),
        },
    }

    with open(config.config_path, "wb") as f:
        tomli_w.dump(data, f)

