r"""Configuration defaults and validation shared by the retry controller
and the fetch helpers."""

from __future__ import annotations

__all__ = [
    "DEFAULT_CANCEL_REASON",
    "DEFAULT_DELAY",
    "DEFAULT_MAX_TRIES",
    "DEFAULT_TIMEOUT",
    "ERRORS_REASON",
    "MAX_TRIES_REASON",
    "TIMEOUT_REASON",
    "RetryOptions",
    "validate_retry_options",
    "validate_timeout",
]

from aresume.core.config import (
    DEFAULT_CANCEL_REASON,
    DEFAULT_DELAY,
    DEFAULT_MAX_TRIES,
    DEFAULT_TIMEOUT,
    ERRORS_REASON,
    MAX_TRIES_REASON,
    TIMEOUT_REASON,
    RetryOptions,
)
from aresume.core.validation import validate_retry_options, validate_timeout
