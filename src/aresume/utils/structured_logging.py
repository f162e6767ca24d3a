r"""Structured logging utilities for machine-readable retry events.

The retry controller reports attempt and termination events through
``log_structured`` with fields such as ``title``, ``attempt`` and
``reason``. These fields are ignored by regular formatters and rendered
as JSON keys by ``StructuredFormatter``.

Example:
    Enable structured logging for aresume:

    ```python
    import logging
    from aresume.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("aresume")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```

    Tag every event of a logical operation with an operation ID:

    ```python
    from aresume import retry_get
    from aresume.utils.structured_logging import clear_operation_id, set_operation_id

    set_operation_id("sync-42")
    try:
        payload = await retry_get("https://api.example.com/data")
    finally:
        clear_operation_id()
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_operation_id",
    "get_operation_id",
    "log_structured",
    "set_operation_id",
]

import contextvars
import json
import logging
import time
from typing import Any

# Context variable for the operation ID (task-safe)
_operation_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation_id", default=None
)

# Attributes of every LogRecord, excluded from the extra fields
_RECORD_ATTRIBUTES = frozenset(
    logging.LogRecord("", logging.NOTSET, "", 0, "", None, None).__dict__
) | {"message", "asctime", "taskName"}


def get_operation_id() -> str | None:
    """Get the operation ID of the current context.

    Returns:
        The current operation ID, or None if not set.
    """
    return _operation_id.get()


def set_operation_id(operation_id: str) -> None:
    """Set the operation ID for the current context.

    The ID is stored in a context variable, so each asyncio task sees the
    value that was set when it was created.

    Args:
        operation_id: The operation ID (e.g. a job or trace ID).

    Example:
        ```pycon
        >>> from aresume.utils.structured_logging import (
        ...     clear_operation_id,
        ...     get_operation_id,
        ...     set_operation_id,
        ... )
        >>> set_operation_id("job-1")
        >>> get_operation_id()
        'job-1'
        >>> clear_operation_id()
        >>> get_operation_id()

        ```
    """
    _operation_id.set(operation_id)


def clear_operation_id() -> None:
    """Clear the operation ID for the current context."""
    _operation_id.set(None)


class StructuredFormatter(logging.Formatter):
    r"""Format log records as single-line JSON objects.

    Standard fields are ``timestamp``, ``level``, ``logger``, ``message``,
    ``module``, ``function`` and ``line``. The operation ID is added when
    set, and so are the fields passed through the ``extra`` parameter.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from io import StringIO
        >>> from aresume.utils.structured_logging import StructuredFormatter
        >>> stream = StringIO()
        >>> handler = logging.StreamHandler(stream)
        >>> handler.setFormatter(StructuredFormatter())
        >>> logger = logging.getLogger("doctest_structured")
        >>> logger.addHandler(handler)
        >>> logger.setLevel(logging.INFO)
        >>> logger.info("attempt failed", extra={"attempt": 2})
        >>> json.loads(stream.getvalue())["attempt"]
        2

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        operation_id = get_operation_id()
        if operation_id is not None:
            log_data["operation_id"] = operation_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                log_data[key] = value

        return json.dumps(log_data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        # ISO 8601 with millisecond precision
        return (
            time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
            + f".{int(record.msecs):03d}Z"
        )


def log_structured(
    logger: logging.Logger,
    level: int,
    message: str,
    **extra: Any,
) -> None:
    """Log a message with structured fields.

    Args:
        logger: Logger to use.
        level: Log level (e.g., logging.DEBUG).
        message: Log message.
        **extra: Additional structured fields to include in the log.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra=extra)
