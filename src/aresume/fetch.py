r"""Retrying JSON fetch helpers built on ``httpx.AsyncClient``.

Each helper wraps a single request in a ``RetryController``. Successful
(2xx) responses are parsed as JSON, and an unparsable body yields
``None``. Responses with status >= 400 raise a non-resumable
``HttpRequestError`` that stops the retries immediately. Network errors
raised by httpx are retried.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_GET_INIT",
    "DEFAULT_POST_INIT",
    "FetchOptions",
    "RequestInit",
    "fetch_json",
    "fetch_once",
    "get_once",
    "post_json_once",
    "retry_fetch",
    "retry_get",
    "retry_post_json",
]

import json
import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

import httpx

from aresume.core.config import DEFAULT_TIMEOUT, RetryOptions
from aresume.core.validation import validate_timeout
from aresume.exceptions import HttpRequestError, ResponseValidationError
from aresume.retry.controller import RetryController

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from aresume.cancellation import CancellationSignal

logger: logging.Logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RequestInit:
    r"""Immutable description of the request sent on every attempt.

    Args:
        method: The HTTP method.
        headers: The request headers.
        content: The raw request body, if any.

    Example:
        ```pycon
        >>> from aresume.fetch import DEFAULT_POST_INIT
        >>> init = DEFAULT_POST_INIT.with_json({"id": 1})
        >>> init.content
        '{"id": 1}'
        >>> DEFAULT_POST_INIT.content is None
        True

        ```
    """

    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    content: str | bytes | None = None

    def with_json(self, data: Any) -> RequestInit:
        r"""Return a copy of this request with ``data`` serialized as the
        JSON body.

        Args:
            data: The JSON-serializable body.

        Returns:
            A new ``RequestInit``. This instance is left unchanged.
        """
        return replace(self, content=json.dumps(data))


DEFAULT_GET_INIT = RequestInit(method="GET", headers={"Accept": "application/json"})
DEFAULT_POST_INIT = RequestInit(
    method="POST",
    headers={"Accept": "application/json", "Content-Type": "application/json"},
)


@dataclass(frozen=True)
class FetchOptions:
    r"""Options applied to the payload of a successful response.

    Args:
        validation_callback: Optional predicate called with the parsed
            payload. A falsy return value rejects the response, and so does
            an exception raised by the callback.
        validation_error: The message of the ``ResponseValidationError``
            raised on rejection.
        validation_resumable: If ``True``, a rejected response is retried
            like a transient failure. By default it stops the retries.
    """

    validation_callback: Callable[[Any], bool] | None = None
    validation_error: str = "response validation failed"
    validation_resumable: bool = False


def _parse_json(text: str) -> Any:
    try:
        return json.loads(text)
    except ValueError:
        return None


def _error_message(response: httpx.Response) -> str:
    text = response.text
    data = _parse_json(text)
    if isinstance(data, dict) and data.get("Message"):
        return str(data["Message"])
    return text or response.reason_phrase or f"status {response.status_code}"


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    init: RequestInit = DEFAULT_GET_INIT,
    fetch_options: FetchOptions | None = None,
) -> Any:
    r"""Send one request and return its parsed JSON payload.

    Args:
        client: The httpx client used to send the request.
        url: The URL to request.
        init: The request description.
        fetch_options: Optional payload validation options.

    Returns:
        The parsed JSON payload, or ``None`` if the body is not valid JSON.

    Raises:
        HttpRequestError: If the status is not 2xx. The error is
            non-resumable when the status is >= 400.
        ResponseValidationError: If the validation callback rejects the
            payload or raises. Both follow ``validation_resumable``.
        httpx.RequestError: If the request could not be sent.
    """
    response = await client.request(
        init.method, url, headers=dict(init.headers), content=init.content
    )
    status_code = response.status_code
    if not 200 <= status_code < 300:
        logger.debug(f"{init.method} request to {url} returned status {status_code}")
        raise HttpRequestError(
            method=init.method,
            url=url,
            message=_error_message(response),
            status_code=status_code,
            response=response,
            resumable=status_code < 400,
        )

    payload = _parse_json(response.text)
    if fetch_options is not None and fetch_options.validation_callback is not None:
        try:
            accepted = fetch_options.validation_callback(payload)
        except Exception as exc:
            logger.debug(f"{init.method} request to {url}: validation callback raised {exc!r}")
            raise ResponseValidationError(
                method=init.method,
                url=url,
                message=f"{fetch_options.validation_error}: {exc}",
                status_code=status_code,
                response=response,
                resumable=fetch_options.validation_resumable,
                cause=exc,
            ) from exc
        if not accepted:
            logger.debug(f"{init.method} request to {url}: payload rejected by validation")
            raise ResponseValidationError(
                method=init.method,
                url=url,
                message=fetch_options.validation_error,
                status_code=status_code,
                response=response,
                resumable=fetch_options.validation_resumable,
            )
    return payload


async def retry_fetch(
    url: str,
    init: RequestInit = DEFAULT_GET_INIT,
    fetch_options: FetchOptions | None = None,
    options: RetryOptions | None = None,
    signal: CancellationSignal | None = None,
    *,
    client: httpx.AsyncClient | None = None,
    timeout: float | httpx.Timeout = DEFAULT_TIMEOUT,
    title: str | None = None,
) -> Any:
    r"""Fetch a JSON payload with automatic re-attempts.

    Args:
        url: The URL to request.
        init: The request description, sent unchanged on every attempt.
        fetch_options: Optional payload validation options.
        options: The retry options. Defaults to ``RetryOptions()``.
        signal: An optional cancellation signal.
        client: An optional httpx client. If ``None``, a client is created
            and closed after use.
        timeout: Maximum seconds to wait for the server response. Only used
            if ``client`` is ``None``. Must be > 0.
        title: An optional operation title. Defaults to ``"<METHOD> <url>"``.

    Returns:
        The parsed JSON payload of the first successful attempt.

    Raises:
        RetryError: If the fetch terminated without success.
        ValueError: If ``timeout`` is invalid.

    Example:
        ```pycon
        >>> import asyncio
        >>> from aresume import CancellationSignal, RetryOptions, retry_fetch
        >>> async def main():
        ...     signal = CancellationSignal()
        ...     signal.timeout_after(5.0)
        ...     return await retry_fetch(
        ...         "https://api.example.com/data",
        ...         options=RetryOptions(max_tries=5, delay=0.5),
        ...         signal=signal,
        ...     )
        ...
        >>> asyncio.run(main())  # doctest: +SKIP

        ```
    """
    validate_timeout(timeout)

    owns_client = client is None
    client = client or httpx.AsyncClient(timeout=timeout)
    try:
        controller = RetryController(
            lambda: fetch_json(client, url, init, fetch_options),
            options,
            signal,
            title=title or f"{init.method} {url}",
        )
        return await controller.run()
    finally:
        if owns_client:
            await client.aclose()


async def retry_get(
    url: str,
    fetch_options: FetchOptions | None = None,
    options: RetryOptions | None = None,
    signal: CancellationSignal | None = None,
    **kwargs: Any,
) -> Any:
    r"""Fetch a JSON payload with a GET request and automatic
    re-attempts.

    ``kwargs`` are passed to ``retry_fetch`` (``client``, ``timeout``,
    ``title``).
    """
    return await retry_fetch(url, DEFAULT_GET_INIT, fetch_options, options, signal, **kwargs)


async def retry_post_json(
    url: str,
    data: Any,
    fetch_options: FetchOptions | None = None,
    options: RetryOptions | None = None,
    signal: CancellationSignal | None = None,
    **kwargs: Any,
) -> Any:
    r"""POST ``data`` as JSON and fetch the JSON response with automatic
    re-attempts.

    The body is serialized once per call into a fresh ``RequestInit``, so
    concurrent calls never share a body.
    """
    init = DEFAULT_POST_INIT.with_json(data)
    return await retry_fetch(url, init, fetch_options, options, signal, **kwargs)


async def fetch_once(
    url: str,
    init: RequestInit = DEFAULT_GET_INIT,
    signal: CancellationSignal | None = None,
    **kwargs: Any,
) -> Any:
    r"""Fetch a JSON payload with a single attempt.

    A failure still surfaces as ``RetryError`` so callers handle one
    error type.
    """
    options = RetryOptions(max_tries=1, delay=None)
    return await retry_fetch(url, init, None, options, signal, **kwargs)


async def get_once(url: str, signal: CancellationSignal | None = None, **kwargs: Any) -> Any:
    r"""Fetch a JSON payload with a single GET attempt."""
    return await fetch_once(url, DEFAULT_GET_INIT, signal, **kwargs)


async def post_json_once(
    url: str, data: Any, signal: CancellationSignal | None = None, **kwargs: Any
) -> Any:
    r"""POST ``data`` as JSON with a single attempt."""
    return await fetch_once(url, DEFAULT_POST_INIT.with_json(data), signal, **kwargs)
