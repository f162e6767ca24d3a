r"""Parameter validation utilities for retry options and HTTP clients.

This module provides validation functions for retry parameters to ensure
they meet the required constraints before a retry controller or a fetch
helper uses them.
"""

from __future__ import annotations

__all__ = ["validate_retry_options", "validate_timeout"]

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx


def validate_timeout(timeout: float | httpx.Timeout) -> None:
    """Validate timeout parameter.

    Args:
        timeout: Maximum seconds to wait for server responses.
            Must be > 0 if provided as a numeric value.

    Raises:
        ValueError: If timeout is a numeric value <= 0.

    Example:
        ```pycon
        >>> from aresume.core.validation import validate_timeout
        >>> validate_timeout(10.0)
        >>> validate_timeout(0)
        Traceback (most recent call last):
        ...
        ValueError: timeout must be > 0, got 0

        ```
    """
    if isinstance(timeout, (int, float)) and timeout <= 0:
        msg = f"timeout must be > 0, got {timeout}"
        raise ValueError(msg)


def validate_retry_options(max_tries: int, delay: float | None = None) -> None:
    """Validate retry options.

    Args:
        max_tries: Maximum number of attempts, including the first one.
            Must be an integer >= 1.
        delay: Seconds to wait between two attempts, or ``None`` to start
            the next attempt on the next event loop iteration.
            Must be >= 0 if provided.

    Raises:
        ValueError: If max_tries is not a positive integer or if delay is
            negative.

    Example:
        ```pycon
        >>> from aresume.core.validation import validate_retry_options
        >>> validate_retry_options(max_tries=3)
        >>> validate_retry_options(max_tries=3, delay=0.5)
        >>> validate_retry_options(max_tries=0)
        Traceback (most recent call last):
        ...
        ValueError: max_tries must be >= 1, got 0

        ```
    """
    if isinstance(max_tries, bool) or not isinstance(max_tries, int):
        msg = f"max_tries must be an integer, got {max_tries!r}"
        raise ValueError(msg)
    if max_tries < 1:
        msg = f"max_tries must be >= 1, got {max_tries}"
        raise ValueError(msg)
    if delay is not None and delay < 0:
        msg = f"delay must be >= 0, got {delay}"
        raise ValueError(msg)
