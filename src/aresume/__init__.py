r"""aresume - Asynchronous retry orchestration with cooperative
cancellation.

This package wraps unreliable asynchronous operations, such as HTTP
requests, with bounded re-attempts, optional delays between attempts,
failure classification and external cancellation or timeout control.

Key Features:
    - ``RetryController`` drives a zero-argument operation factory through
      strictly sequential attempts and settles its result exactly once
    - Failures marked ``resumable = False`` stop the retries immediately
    - ``CancellationSignal`` is a shareable, push-based cancellation token
      with timeout support, usable by several controllers at once
    - A single aggregate ``RetryError`` carries every attempt failure and the
      terminal reason
    - Retrying JSON fetch helpers built on httpx

Example:
    ```pycon
    >>> import asyncio
    >>> from aresume import CancellationSignal, RetryOptions, retry_get
    >>> async def main():
    ...     signal = CancellationSignal()
    ...     signal.timeout_after(10.0)
    ...     return await retry_get(
    ...         "https://api.example.com/data",
    ...         options=RetryOptions(max_tries=5, delay=1.0),
    ...         signal=signal,
    ...     )
    ...
    >>> asyncio.run(main())  # doctest: +SKIP

    ```
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_DELAY",
    "DEFAULT_MAX_TRIES",
    "DEFAULT_TIMEOUT",
    "CancellationSignal",
    "FetchOptions",
    "HttpRequestError",
    "RequestInit",
    "ResponseValidationError",
    "RetryController",
    "RetryError",
    "RetryOptions",
    "__version__",
    "fetch_once",
    "get_once",
    "is_resumable",
    "post_json_once",
    "retry_async",
    "retry_fetch",
    "retry_get",
    "retry_post_json",
]

from importlib.metadata import PackageNotFoundError, version

from aresume.cancellation import CancellationSignal
from aresume.core.config import (
    DEFAULT_DELAY,
    DEFAULT_MAX_TRIES,
    DEFAULT_TIMEOUT,
    RetryOptions,
)
from aresume.exceptions import (
    HttpRequestError,
    ResponseValidationError,
    RetryError,
    is_resumable,
)
from aresume.fetch import (
    FetchOptions,
    RequestInit,
    fetch_once,
    get_once,
    post_json_once,
    retry_fetch,
    retry_get,
    retry_post_json,
)
from aresume.retry import RetryController, retry_async

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
