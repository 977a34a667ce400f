"""Structured logging for voicelift.

structlog renders through the stdlib ``logging`` module, so host
applications that already own the root logger keep control of handlers.
Format and level come from ``VOICELIFT_LOG_FORMAT`` ("console" | "json")
and ``VOICELIFT_LOG_LEVEL`` unless passed explicitly.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TextIO

import structlog

_configured = False

_LOG_FORMATS = ("console", "json")


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    log_format: str | None = None,
    level: str | None = None,
    stream: TextIO | None = None,
) -> None:
    """Configure structlog + stdlib logging once per process.

    Later calls are ignored until ``reset_logging()`` runs.

    Args:
        log_format: "json" or "console". Unknown values fall back to "console".
        level: Log level name. Defaults to ``VOICELIFT_LOG_LEVEL`` or "WARNING".
        stream: Handler stream. Defaults to stderr so CLI output stays clean.
    """
    global _configured
    if _configured:
        return

    resolved_format = (log_format or os.environ.get("VOICELIFT_LOG_FORMAT", "console")).lower()
    if resolved_format not in _LOG_FORMATS:
        resolved_format = "console"
    resolved_level = (level or os.environ.get("VOICELIFT_LOG_LEVEL", "WARNING")).upper()

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(resolved_format),
            ],
        )
    )

    package_logger = logging.getLogger("voicelift")
    package_logger.handlers.clear()
    package_logger.addHandler(handler)
    package_logger.setLevel(getattr(logging, resolved_level, logging.WARNING))
    package_logger.propagate = False

    _configured = True


def reset_logging() -> None:
    """Drop the voicelift handler so the next call reconfigures (tests)."""
    global _configured
    logging.getLogger("voicelift").handlers.clear()
    structlog.reset_defaults()
    _configured = False


def get_logger(component: str) -> structlog.stdlib.BoundLogger:
    """Return a logger bound to a component name.

    Args:
        component: Component name (e.g. "enhancement.pipeline", "cli").

    Returns:
        BoundLogger writing under the ``voicelift.<component>`` stdlib logger.
    """
    configure_logging()
    return structlog.get_logger(f"voicelift.{component}").bind(  # type: ignore[no-any-return]
        component=component
    )
