"""
Logging configuration for proj-facts.

Library output stays quiet by default; stdout belongs to the MCP transport,
so everything goes to stderr or the ops log.
"""

import logging
import sys
import warnings
from logging.handlers import RotatingFileHandler
from pathlib import Path


def configure_quiet_mode(quiet: bool = True):
    """
    Configure logging to suppress verbose library output.

    Args:
        quiet: If True, suppress warnings and chatty library loggers.
    """
    if quiet:
        warnings.filterwarnings("ignore")
        logging.getLogger("mcp").setLevel(logging.WARNING)
        logging.getLogger("httpx").setLevel(logging.WARNING)
        logging.getLogger("anyio").setLevel(logging.WARNING)


def enable_debug_mode():
    """Enable debug-level logging to stderr."""
    warnings.filterwarnings("default")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Add stderr handler if not already present
    if not any(isinstance(h, logging.StreamHandler) and h.stream == sys.stderr
               for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setLevel(logging.DEBUG)
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
            datefmt="%H:%M:%S"
        ))
        root_logger.addHandler(handler)

    for name in ("projfacts", "mcp"):
        logging.getLogger(name).setLevel(logging.DEBUG)


def configure_ops_log(log_dir) -> RotatingFileHandler:
    """Configure a persistent operations log.

    Writes to {log_dir}/facts-ops.log using a rotating file handler
    (1MB max, 3 backups). Returns the handler so it can be removed.
    """
    log_path = Path(log_dir) / "facts-ops.log"
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        str(log_path),
        maxBytes=1_000_000,
        backupCount=3,
    )
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s %(levelname)s %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    ))

    facts_logger = logging.getLogger("projfacts")
    facts_logger.addHandler(handler)
    # Let INFO through even in quiet mode
    if facts_logger.level == logging.NOTSET or facts_logger.level > logging.INFO:
        facts_logger.setLevel(logging.INFO)

    return handler
