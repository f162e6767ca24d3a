r"""Operation factories shared by the tests."""

from __future__ import annotations

__all__ = ["FlakyOperation", "TerminalError", "TransientError", "slow_operation"]

import asyncio
import time
from typing import Any


class TransientError(Exception):
    r"""Error without ``resumable`` flag, so it is retried."""


class TerminalError(Exception):
    r"""Error that stops the retries immediately."""

    resumable = False


class FlakyOperation:
    r"""Operation factory failing a fixed number of times before
    succeeding.

    Args:
        failures: The errors raised by the first calls, in order.
        result: The value returned once the failures are used up.
        duration: Seconds each call takes.
    """

    def __init__(
        self, failures: list[Exception] | None = None, result: Any = "ok", duration: float = 0.0
    ) -> None:
        self.failures = list(failures or [])
        self.result = result
        self.duration = duration
        self.calls = 0
        self.started_at: list[float] = []
        self.ended_at: list[float] = []

    async def __call__(self) -> Any:
        self.calls += 1
        self.started_at.append(time.monotonic())
        try:
            if self.duration:
                await asyncio.sleep(self.duration)
            if self.failures:
                raise self.failures.pop(0)
            return self.result
        finally:
            self.ended_at.append(time.monotonic())


async def slow_operation(duration: float, result: Any = "late") -> Any:
    await asyncio.sleep(duration)
    return result
