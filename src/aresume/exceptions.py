r"""Define the exceptions raised by the retry and fetch helpers."""

from __future__ import annotations

__all__ = ["HttpRequestError", "ResponseValidationError", "RetryError", "is_resumable"]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    import httpx


def is_resumable(error: BaseException) -> bool:
    r"""Indicate if an attempt failure can be retried.

    A failure is terminal only when it explicitly carries
    ``resumable = False``. Errors without the attribute are retryable.

    Args:
        error: The error raised by an attempt.

    Returns:
        ``True`` if another attempt may follow, otherwise ``False``.

    Example:
        ```pycon
        >>> from aresume.exceptions import HttpRequestError, is_resumable
        >>> is_resumable(RuntimeError("boom"))
        True
        >>> is_resumable(
        ...     HttpRequestError("GET", "https://x.org", "bad request", resumable=False)
        ... )
        False

        ```
    """
    return getattr(error, "resumable", True) is not False


class RetryError(Exception):
    r"""Aggregate failure raised when a retried operation terminates
    without success.

    Args:
        errors: The failures collected across attempts, in attempt order.
        reason: The terminal reason. One of ``"errors"``, ``"max tries"``,
            ``"timeout"`` or a caller-supplied cancellation reason.
        title: The title of the operation, used in the message.

    Example:
        ```pycon
        >>> from aresume import RetryError
        >>> error = RetryError([ValueError("a"), ValueError("b")], "max tries")
        >>> error.reason
        'max tries'
        >>> len(error.errors)
        2
        >>> str(error)
        'operation failed after 2 attempt(s) (max tries)'

        ```
    """

    # an aggregate failure is never retried by an outer controller
    resumable = False

    def __init__(
        self, errors: Sequence[BaseException], reason: str, title: str = "operation"
    ) -> None:
        self.errors = list(errors)
        self.reason = reason
        self.title = title
        super().__init__(f"{title} failed after {len(self.errors)} attempt(s) ({reason})")

    @property
    def last_error(self) -> BaseException | None:
        r"""The failure of the last accepted attempt, or ``None`` if no
        attempt failed."""
        return self.errors[-1] if self.errors else None


class HttpRequestError(Exception):
    r"""Raised when an HTTP attempt returns an unexpected response.

    Args:
        method: The HTTP method (e.g. ``"GET"``).
        url: The requested URL.
        message: The error message.
        status_code: The HTTP status code, if a response was received.
        response: The ``httpx.Response``, if any.
        resumable: ``False`` to stop retrying immediately.
        cause: The underlying exception, if any.

    Example:
        ```pycon
        >>> from aresume import HttpRequestError
        >>> error = HttpRequestError(
        ...     "GET", "https://api.example.com", "not found", status_code=404, resumable=False
        ... )
        >>> error.status_code
        404
        >>> error.resumable
        False

        ```
    """

    def __init__(
        self,
        method: str,
        url: str,
        message: str,
        status_code: int | None = None,
        response: httpx.Response | None = None,
        resumable: bool = True,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.method = method
        self.url = url
        self.message = message
        self.status_code = status_code
        self.response = response
        self.resumable = resumable
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        args: dict[str, Any] = {"method": self.method, "url": self.url}
        if self.status_code is not None:
            args["status_code"] = self.status_code
        args["resumable"] = self.resumable
        body = ", ".join(f"{key}={value!r}" for key, value in args.items())
        return f"{self.__class__.__qualname__}({body})"


class ResponseValidationError(HttpRequestError):
    r"""Raised when a validation callback rejects an otherwise successful
    response payload."""
