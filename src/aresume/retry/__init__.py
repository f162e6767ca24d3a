r"""Retry package.

Public API:
    - RetryController: Drives an operation factory through bounded attempts
    - retry_async: Convenience coroutine around RetryController
"""

from __future__ import annotations

__all__ = ["RetryController", "retry_async"]

from aresume.retry.controller import RetryController, retry_async
