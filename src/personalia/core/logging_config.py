"""Central logging configuration utilities.

`configure_logging` wires separate stdout/stderr sinks and injects the id of
the content request being worked on into all log records. Adapters or core
code never mutate global logging; they only emit via `LoggingPort` or
standard module loggers. As a library we never call `configure_logging`
ourselves: applications (and the examples) opt in.

The request id lives in a context variable, so concurrent polls running in
separate asyncio tasks each log with their own id.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional
import contextvars

# Request id context variable (populated by the poller for the duration of a poll)
request_id_var: contextvars.ContextVar[str] = contextvars.ContextVar(
    "request_id", default="-"
)

DEFAULT_FORMAT = (
    "[%(asctime)s] %(levelname)s %(name)s %(request_id)s: %(message)s"
)


def coerce_level(level: int | str | None) -> int:
    if level is None:
        return logging.INFO
    if isinstance(level, int):
        return level
    key = str(level).upper().strip()
    # Python 3.11 mapping helper
    mapping_getter = getattr(logging, "getLevelNamesMapping", None)
    if callable(mapping_getter):
        mapping = mapping_getter()
        if isinstance(mapping, dict) and key in mapping:
            return mapping[key]
    return logging.INFO


class _RequestIdFilter(logging.Filter):
    """Inject request id from contextvar into every log record."""

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover - simple
        record.request_id = request_id_var.get()
        return True


class _MaxLevelFilter(logging.Filter):
    def __init__(self, max_level: int):
        super().__init__()
        self.max_level = max_level

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover
        return record.levelno <= self.max_level


class _MinLevelFilter(logging.Filter):
    def __init__(self, min_level: int):
        super().__init__()
        self.min_level = min_level

    def filter(self, record: logging.LogRecord) -> bool:  # pragma: no cover
        return record.levelno >= self.min_level


def configure_logging(
    level: int | str | None = None,
    fmt: Optional[str] = None,
    quiet_aiohttp: bool = True,
) -> None:
    """Configure root logger with separate stdout/stderr sinks & request id.

    Notes
    -----
    * Existing root handlers are replaced, so calling this twice is harmless.
    * aiohttp's own client loggers are raised to WARNING unless disabled.
    """
    numeric_level = coerce_level(level)
    fmt = fmt or DEFAULT_FORMAT

    root = logging.getLogger()
    root.setLevel(numeric_level)

    for h in list(root.handlers):
        root.removeHandler(h)

    formatter = logging.Formatter(fmt)
    rid_filter = _RequestIdFilter()

    # stdout handler for DEBUG/INFO
    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(logging.DEBUG)
    stdout_handler.addFilter(_MaxLevelFilter(logging.INFO))
    stdout_handler.addFilter(rid_filter)
    stdout_handler.setFormatter(formatter)

    # stderr handler for WARNING+
    stderr_handler = logging.StreamHandler(stream=sys.stderr)
    stderr_handler.setLevel(logging.WARNING)
    stderr_handler.addFilter(_MinLevelFilter(logging.WARNING))
    stderr_handler.addFilter(rid_filter)
    stderr_handler.setFormatter(formatter)

    root.addHandler(stdout_handler)
    root.addHandler(stderr_handler)

    if quiet_aiohttp:
        logging.getLogger("aiohttp").setLevel(logging.WARNING)

    logging.getLogger("personalia").debug(
        "Logging configured level=%s quiet_aiohttp=%s", numeric_level, quiet_aiohttp
    )
