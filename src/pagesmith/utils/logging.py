"""Structured logging setup for pagesmith."""

import structlog
from pathlib import Path
from typing import Any
import os


def configure_logging(level: str | None = None) -> None:
    """
    Configure structlog for JSON logging to ~/.cache/pagesmith/logs/pagesmith.log.

    Log level can be controlled via PAGESMITH_LOG_LEVEL environment variable:
    - Set to "DEBUG" to see every mutation intent, including silent no-ops
    - Defaults to "INFO" if not set

    Log levels:
    - DEBUG: Individual mutations, ignored intents, id lookups that missed
    - INFO: Page loads/saves, template selection, CLI commands
    - WARNING: Rejected intents reported to the user
    - ERROR: Storage failures, invalid documents

    Args:
        level: Explicit level that wins over the environment (used by --verbose)

    Example:
        # Enable debug logging
        export PAGESMITH_LOG_LEVEL=DEBUG
        pagesmith insert heading --index 0

        # View logs with jq for readability:
        tail -f ~/.cache/pagesmith/logs/pagesmith.log | jq .
    """
    log_dir = Path.home() / ".cache" / "pagesmith" / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "pagesmith.log"

    log_level = (level or os.environ.get("PAGESMITH_LOG_LEVEL", "INFO")).upper()

    valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
    if log_level not in valid_levels:
        log_level = "INFO"

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.WriteLoggerFactory(file=open(log_file, "a")),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically __name__ of calling module)

    Returns:
        Structured logger instance

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("page_saved", path="/tmp/page.json", nodes=3)
    """
    return structlog.get_logger(name)
