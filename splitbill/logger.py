"""
Structured Logging

Every component logs through structlog so that a settlement run can be
followed event by event: per-person figures at debug level, data-integrity
diagnostics at warning level.

The engine never prints. Callers decide where log lines go by calling
configure_logging() once at startup; until then structlog's stdlib
integration routes events through the standard `logging` module.
"""

import logging
import sys
from typing import Optional

import structlog

from splitbill.config import get_settings


def _processors(json_output: bool) -> list:
    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    return [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        renderer,
    ]


# Configure structlog for local logging
structlog.configure(
    processors=_processors(json_output=True),
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=False,
)


def configure_logging(
    level: Optional[str] = None,
    json_output: Optional[bool] = None,
) -> None:
    """
    Configure log level and renderer.
    
    Args:
        level: Stdlib level name. Defaults to AppSettings.log_level.
        json_output: JSON lines if True, human-readable otherwise.
                     Defaults to AppSettings.log_json.
    """
    app = get_settings().app
    level = level or app.log_level
    if json_output is None:
        json_output = app.log_json
    
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
        force=True,
    )
    structlog.configure(processors=_processors(json_output))


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to `name`."""
    return structlog.get_logger(name)
