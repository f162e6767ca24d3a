r"""Configuration dataclass and defaults for retry controllers.

This module provides configuration constants and a dataclass-based
configuration object for ``RetryController`` and the fetch helpers.
"""

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
]

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from aresume.core.validation import validate_retry_options

if TYPE_CHECKING:
    from collections.abc import Callable


# Default maximum number of attempts, including the first one
DEFAULT_MAX_TRIES = 3

# Default delay between attempts. None means the next attempt starts on the
# next event loop iteration
DEFAULT_DELAY = None

# Default timeout in seconds for the httpx clients created by the fetch helpers
DEFAULT_TIMEOUT = 10.0

# Terminal reasons carried by RetryError
DEFAULT_CANCEL_REASON = "cancelled"
TIMEOUT_REASON = "timeout"
ERRORS_REASON = "errors"
MAX_TRIES_REASON = "max tries"


@dataclass(frozen=True)
class RetryOptions:
    """Configuration for a retry controller.

    Args:
        max_tries: Maximum number of attempts, including the first one.
            Must be >= 1.
        delay: Seconds to wait after a failed attempt before the next one.
            ``None`` starts the next attempt on the next event loop
            iteration. Must be >= 0 if provided.
        on_error: Optional callback called with each failure. It is used for
            observability only and never changes the retry flow.
        settle_on_exhaustion: If ``True``, the controller raises
            ``RetryError`` with reason ``"max tries"`` once all attempts
            failed. If ``False``, the result stays pending until it is
            cancelled.

    Example:
        ```pycon
        >>> from aresume.core.config import RetryOptions
        >>> options = RetryOptions()
        >>> options.max_tries
        3
        >>> options = RetryOptions(max_tries=5, delay=0.5)
        >>> merged = options.merge(max_tries=10)
        >>> merged.max_tries
        10
        >>> options.max_tries
        5

        ```
    """

    max_tries: int = DEFAULT_MAX_TRIES
    delay: float | None = DEFAULT_DELAY
    on_error: Callable[[Exception], None] | None = None
    settle_on_exhaustion: bool = True

    def __post_init__(self) -> None:
        """Validate configuration parameters after initialization.

        Raises:
            ValueError: If any parameter fails validation.
        """
        validate_retry_options(max_tries=self.max_tries, delay=self.delay)

    def merge(self, **overrides: Any) -> RetryOptions:
        """Create new options with the specified parameters overridden.

        Only non-None override values are applied.

        Args:
            **overrides: Keyword arguments for parameters to override.

        Returns:
            A new ``RetryOptions`` instance with overrides applied.
        """
        filtered_overrides = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **filtered_overrides)

    def to_dict(self) -> dict[str, Any]:
        """Convert the options to a dictionary.

        Returns:
            Dictionary with the retry options.

        Example:
            ```pycon
            >>> from aresume.core.config import RetryOptions
            >>> RetryOptions(max_tries=2).to_dict()["max_tries"]
            2

            ```
        """
        return {
            "max_tries": self.max_tries,
            "delay": self.delay,
            "on_error": self.on_error,
            "settle_on_exhaustion": self.settle_on_exhaustion,
        }
