r"""Implement a shareable, push-based cancellation signal.

A ``CancellationSignal`` is created by the caller and shared by reference
with every component that should react to cancellation, for example one
deadline aborting several retry controllers at once.
"""

from __future__ import annotations

__all__ = ["CancellationSignal"]

import asyncio
import logging
from typing import TYPE_CHECKING

from aresume.core.config import DEFAULT_CANCEL_REASON, TIMEOUT_REASON

if TYPE_CHECKING:
    from collections.abc import Callable

logger: logging.Logger = logging.getLogger(__name__)


class CancellationSignal:
    r"""Write-once token broadcasting a cancellation request to its
    listeners.

    The first call to ``cancel`` sets the reason, and the reason is never
    cleared or overwritten afterwards. Every call to ``cancel`` invokes the
    registered listeners synchronously, in registration order, with that
    first reason.

    Example:
        ```pycon
        >>> from aresume import CancellationSignal
        >>> signal = CancellationSignal()
        >>> signal.on_cancelled(lambda reason: print(f"cancelled: {reason}"))
        1
        >>> signal.is_cancelled()
        False
        >>> signal.cancel("deadline")
        cancelled: deadline
        >>> signal.cancel("other")
        cancelled: deadline
        >>> signal.reason
        'deadline'

        ```
    """

    def __init__(self) -> None:
        self._reason: str | None = None
        self._listeners: list[Callable[[str], object]] = []

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(reason={self._reason!r}, "
            f"listeners={len(self._listeners)})"
        )

    @property
    def reason(self) -> str | None:
        r"""The cancellation reason, or ``None`` if not cancelled."""
        return self._reason

    def is_cancelled(self) -> bool:
        r"""Indicate if the signal was cancelled.

        Returns:
            ``True`` if ``cancel`` was called at least once.
        """
        return self._reason is not None

    def cancel(self, reason: str | None = None) -> None:
        r"""Cancel the signal and notify every listener.

        Listener exceptions are not caught and propagate to the caller.

        Args:
            reason: The cancellation reason. ``"cancelled"`` is used if
                it is ``None`` or empty. It is ignored if the signal was
                already cancelled.
        """
        if self._reason is None:
            self._reason = reason or DEFAULT_CANCEL_REASON
            logger.debug(f"Signal cancelled ({self._reason})")
        for listener in list(self._listeners):
            listener(self._reason)

    def timeout_after(self, interval: float) -> asyncio.TimerHandle:
        r"""Schedule a ``cancel("timeout")`` after ``interval`` seconds.

        The scheduled call still fires if the signal was cancelled earlier,
        but then it only notifies the listeners again.

        Args:
            interval: The delay in seconds. Must be >= 0.

        Returns:
            The handle of the scheduled call.

        Raises:
            ValueError: If ``interval`` is negative.
            RuntimeError: If there is no running event loop.
        """
        if interval < 0:
            msg = f"interval must be >= 0, got {interval}"
            raise ValueError(msg)
        loop = asyncio.get_running_loop()
        logger.debug(f"Signal will time out in {interval:.3f}s")
        return loop.call_later(interval, self.cancel, TIMEOUT_REASON)

    def on_cancelled(self, callback: Callable[[str], object]) -> int:
        r"""Register a listener called with the reason on every
        ``cancel`` call.

        Listeners cannot be unregistered and live as long as the signal.

        Args:
            callback: The listener.

        Returns:
            The number of registered listeners.
        """
        self._listeners.append(callback)
        return len(self._listeners)
