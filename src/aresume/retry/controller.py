r"""Asynchronous retry controller with cooperative cancellation.

This module provides the ``RetryController`` class that drives a
zero-argument asynchronous operation factory through bounded, strictly
sequential attempts, and the ``retry_async`` convenience coroutine.
"""

from __future__ import annotations

__all__ = ["RetryController", "retry_async"]

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from aresume.core.config import ERRORS_REASON, MAX_TRIES_REASON, RetryOptions
from aresume.exceptions import RetryError, is_resumable
from aresume.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aresume.cancellation import CancellationSignal

T = TypeVar("T")

logger: logging.Logger = logging.getLogger(__name__)


class RetryController(Generic[T]):
    r"""Run an asynchronous operation with bounded re-attempts.

    Each attempt calls ``factory`` and awaits the returned awaitable. The
    overall result settles exactly once:

    - with the value of the first successful attempt,
    - with ``RetryError`` (reason ``"errors"``) as soon as an attempt fails
      with an error marked ``resumable = False``,
    - with ``RetryError`` (reason ``"max tries"``) once ``max_tries``
      attempts failed,
    - with ``RetryError`` carrying the signal reason when the cancellation
      signal fires, even while an attempt is in flight.

    Cancellation never interrupts the attempt in flight. Its eventual
    outcome is ignored because the controller is already terminated.

    Args:
        factory: A zero-argument callable returning an awaitable. It is
            called again for every attempt.
        options: The retry options. Defaults to ``RetryOptions()``.
        signal: An optional cancellation signal, possibly shared with
            other controllers.
        title: An optional title for the operation, used in logs and error
            messages.

    Raises:
        ValueError: If ``factory`` is ``None``.
        TypeError: If ``factory`` is not callable.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aresume import RetryController, RetryOptions
        >>> calls = []
        >>> async def flaky():
        ...     calls.append(1)
        ...     if len(calls) < 2:
        ...         raise ConnectionError("reset")
        ...     return "ok"
        ...
        >>> controller = RetryController(flaky, RetryOptions(max_tries=5))
        >>> asyncio.run(controller.run())
        'ok'
        >>> controller.current_attempt
        2

        ```
    """

    def __init__(
        self,
        factory: Callable[[], Awaitable[T]],
        options: RetryOptions | None = None,
        signal: CancellationSignal | None = None,
        *,
        title: str | None = None,
    ) -> None:
        if factory is None:
            msg = "missing operation factory"
            raise ValueError(msg)
        if not callable(factory):
            msg = f"operation factory must be callable, got {type(factory).__name__}"
            raise TypeError(msg)
        self.factory = factory
        self.options = options if options is not None else RetryOptions()
        self.signal = signal
        self.title = title

        self.current_attempt = 0
        self.errors: list[Exception] = []
        self.started = False
        self._outcome: asyncio.Future[T] | None = None
        self._task: asyncio.Task[None] | None = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(title={self.display_title!r}, "
            f"attempt={self.current_attempt}/{self.options.max_tries}, "
            f"terminated={self.is_terminated})"
        )

    @property
    def display_title(self) -> str:
        r"""The title of the operation, or ``"operation"`` if unset."""
        return self.title or "operation"

    @property
    def is_terminated(self) -> bool:
        r"""``True`` once the overall result has settled."""
        return self._outcome is not None and self._outcome.done()

    async def run(self) -> T:
        r"""Start the attempts on first call and wait for the result.

        Later calls wait for the same result and never start new attempts.
        All callers share that result: cancelling any task awaiting
        ``run()`` cancels the result for every caller and terminates the
        controller. Wrap the call in ``asyncio.shield`` to wait without
        owning the operation.

        Returns:
            The value of the first successful attempt.

        Raises:
            RetryError: If the operation terminated without success.
            asyncio.CancelledError: If the result or the attempt task was
                cancelled.
            BaseException: Any non-``Exception`` error raised by an
                attempt, which stops the attempts.
        """
        if not self.started:
            self._start()
        return await self._outcome

    def _start(self) -> None:
        loop = asyncio.get_running_loop()
        self.started = True
        self._outcome = loop.create_future()
        if self.signal is not None:
            self.signal.on_cancelled(self._cancel)
            if self.signal.is_cancelled():
                self._cancel(self.signal.reason)
                return
        self._task = loop.create_task(self._run_attempts())
        self._task.add_done_callback(self._on_task_done)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        if self._outcome.done():
            return
        if task.cancelled():
            logger.debug(f"{self.display_title}: attempt task cancelled, cancelling the result")
            self._outcome.cancel()
            return
        exc = task.exception()
        if exc is not None:
            logger.debug(f"{self.display_title}: attempt task failed: {exc!r}")
            self._outcome.set_exception(exc)

    async def _run_attempts(self) -> None:
        max_tries = self.options.max_tries
        while not self.is_terminated:
            self.current_attempt += 1
            attempt = self.current_attempt
            log_structured(
                logger,
                logging.DEBUG,
                f"{self.display_title}: attempt {attempt}/{max_tries}",
                title=self.display_title,
                attempt=attempt,
                max_tries=max_tries,
            )
            try:
                result = await self.factory()
            except Exception as exc:
                if self.is_terminated:
                    logger.debug(
                        f"{self.display_title}: ignoring failure of attempt {attempt} "
                        f"after termination: {exc!r}"
                    )
                    return
                self._record_failure(exc)
                if self.is_terminated:
                    return
                if not is_resumable(exc):
                    self._fail(ERRORS_REASON)
                    return
                if attempt >= max_tries:
                    self._exhaust()
                    return
                await asyncio.sleep(self.options.delay or 0)
                continue

            if self.is_terminated:
                logger.debug(
                    f"{self.display_title}: ignoring result of attempt {attempt} after termination"
                )
                return
            log_structured(
                logger,
                logging.DEBUG,
                f"{self.display_title}: attempt {attempt}/{max_tries} succeeded",
                title=self.display_title,
                attempt=attempt,
                max_tries=max_tries,
            )
            self._outcome.set_result(result)
            return

    def _record_failure(self, error: Exception) -> None:
        self.errors.append(error)
        logger.debug(
            f"{self.display_title}: attempt {self.current_attempt}/{self.options.max_tries} "
            f"failed: {error!r}"
        )
        if self.options.on_error is None:
            return
        try:
            self.options.on_error(error)
        except Exception:
            logger.exception(f"{self.display_title}: on_error callback raised")

    def _exhaust(self) -> None:
        if self.options.settle_on_exhaustion:
            self._fail(MAX_TRIES_REASON)
        else:
            logger.debug(
                f"{self.display_title}: all {self.options.max_tries} attempts failed, "
                "leaving the result pending"
            )

    def _cancel(self, reason: str) -> None:
        if self._outcome is None or self._outcome.done():
            return
        self.current_attempt = self.options.max_tries
        self._fail(reason)

    def _fail(self, reason: str) -> None:
        log_structured(
            logger,
            logging.DEBUG,
            f"{self.display_title}: terminated after {len(self.errors)} failure(s) ({reason})",
            title=self.display_title,
            attempt=self.current_attempt,
            reason=reason,
        )
        self._outcome.set_exception(RetryError(self.errors, reason, self.display_title))


async def retry_async(
    factory: Callable[[], Awaitable[T]],
    options: RetryOptions | None = None,
    signal: CancellationSignal | None = None,
    *,
    title: str | None = None,
    **overrides: Any,
) -> T:
    r"""Run an asynchronous operation with automatic re-attempts.

    Args:
        factory: A zero-argument callable returning an awaitable.
        options: The retry options. Defaults to ``RetryOptions()``.
        signal: An optional cancellation signal.
        title: An optional title for the operation.
        **overrides: Retry options overriding ``options`` (e.g.
            ``max_tries=5``). ``None`` values are ignored.

    Returns:
        The value of the first successful attempt.

    Raises:
        RetryError: If the operation terminated without success.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aresume import RetryError, retry_async
        >>> async def always_fails():
        ...     raise TimeoutError("slow")
        ...
        >>> try:
        ...     asyncio.run(retry_async(always_fails, max_tries=2))
        ... except RetryError as exc:
        ...     print(exc.reason, len(exc.errors))
        ...
        max tries 2

        ```
    """
    effective_options = (options if options is not None else RetryOptions()).merge(**overrides)
    return await RetryController(factory, effective_options, signal, title=title).run()
