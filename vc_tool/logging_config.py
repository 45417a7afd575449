"""Logging configuration for the vc CLI.

Suppresses loguru terminal output by default. Verbose mode adds a filtered
stderr sink; a configured log file receives everything at DEBUG.
"""

from __future__ import annotations

import sys
from typing import Optional

from loguru import logger

_configured = False


def configure_logging(verbose: bool = False, log_file: Optional[str] = None) -> None:
    """Configure loguru sinks for a CLI run.

    Args:
        verbose: If True, also log INFO+ to stderr with minimal formatting.
        log_file: Optional path of a rotating DEBUG log.
    """
    global _configured

    if _configured:
        return

    # Remove default stderr handler
    logger.remove()

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="1 week",
            level="DEBUG",
        )

    if verbose:
        logger.add(
            sys.stderr,
            level="INFO",
            format="<dim>{time:HH:mm:ss}</dim> | {message}",
        )

    _configured = True


def reset_logging() -> None:
    """Reset logging configuration (for testing)."""
    global _configured
    logger.remove()
    _configured = False
