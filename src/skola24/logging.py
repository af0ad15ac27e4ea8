"""structlog setup for the exporter.

Every event carries the writing module under the "logger" key, so a line
from the render client reads `logger=skola24.render event=render_requested`.
Output goes to stderr; stdout is left free for the user.
"""

import logging
import sys
from typing import TextIO

import structlog

SHARED_PROCESSORS = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.StackInfoRenderer(),
    structlog.dev.set_exc_info,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
]


def setup_logging(
    json_output: bool = False, log_level: str = "INFO", stream: TextIO | None = None
) -> None:
    """Configure structlog once per process.

    Args:
        json_output: Render JSON lines instead of the colored console format.
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
        stream: Where to write; defaults to sys.stderr.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)
    stream = stream or sys.stderr

    if json_output:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=stream.isatty())

    structlog.configure(
        processors=[*SHARED_PROCESSORS, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )

    # Playwright and asyncio report through stdlib logging; existing handlers win
    logging.basicConfig(
        format="%(levelname)s %(name)s: %(message)s",
        stream=stream,
        level=numeric_level,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger whose events carry `logger=<name>`.

    Args:
        name: Usually __name__ of the calling module.
    """
    return structlog.get_logger().bind(logger=name)
