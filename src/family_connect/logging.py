"""Structlog setup for the family-connect CLI.

Library modules only call ``structlog.get_logger(__name__)`` and never print.
The CLI configures rendering once per invocation. Events go to stderr so
they never interleave with the rich tables written to stdout, which keeps
command output pipeable. Graph events use dotted names (``connect.stored``,
``connect.rejected``, ``traverse.memoized``, ``family.loaded``).
"""
from __future__ import annotations

import logging
import sys
from typing import Literal

import structlog

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def configure_logging(level: LogLevel = "WARNING", json_output: bool = True) -> None:
    """Route structlog events to stderr at ``level``.

    Args:
        level: Lowest level emitted
        json_output: JSON lines for machine consumption, or colourless
            console lines for reading in a terminal
    """
    numeric_level = getattr(logging, level)
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="ISO"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        # Module-level loggers must pick up a later reconfiguration.
        cache_logger_on_first_use=False,
    )
