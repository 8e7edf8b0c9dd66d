"""structlog setup for the rangeconf CLI.

Engine modules log through stdlib ``logging`` under the ``rangeconf``
namespace; structlog renders those records and its own events through
one stderr handler, either for humans or as JSON lines (``--log-json``).
Configuration paths attached to events as tuples are rendered in dotted
form (``db.replicas[0]``) so both outputs stay readable.
"""

from __future__ import annotations

import logging
import sys

import structlog
from structlog.typing import EventDict, Processor, WrappedLogger

from rangeconf.domain.ranges import format_path

# Noisy at DEBUG, never interesting here.
_QUIET_LOGGERS = ("ruamel", "ruamel.yaml")


def format_path_fields(_logger: WrappedLogger, _name: str, event_dict: EventDict) -> EventDict:
    """Render tuple-valued ``path`` fields as dotted configuration paths."""
    path = event_dict.get("path")
    if isinstance(path, tuple):
        event_dict["path"] = format_path(path)
    return event_dict


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route all ``rangeconf`` logging to stderr.

    Args:
        verbose: Let ``rangeconf`` DEBUG records through (profile overlay,
            normalization, fatal reports, span timings).  Otherwise WARNING+.
        log_json: One JSON object per line instead of console output.
    """
    shared: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        format_path_fields,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    renderer: Processor
    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("rangeconf").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
