from __future__ import annotations

import httpx
import pytest

from aresume import HttpRequestError, ResponseValidationError, RetryError, is_resumable

TEST_URL = "https://api.example.com/data"


##################################
#     Tests for is_resumable     #
##################################


class _Flagged(Exception):
    def __init__(self, resumable: object) -> None:
        super().__init__("flagged")
        self.resumable = resumable


def test_is_resumable_without_flag() -> None:
    assert is_resumable(ValueError("boom"))


def test_is_resumable_true() -> None:
    assert is_resumable(_Flagged(resumable=True))


def test_is_resumable_false() -> None:
    assert not is_resumable(_Flagged(resumable=False))


@pytest.mark.parametrize("flag", [None, 0, ""])
def test_is_resumable_only_false_is_terminal(flag: object) -> None:
    assert is_resumable(_Flagged(resumable=flag))


################################
#     Tests for RetryError     #
################################


def test_retry_error_attributes() -> None:
    errors = [ValueError("a"), ValueError("b")]
    error = RetryError(errors, "max tries")
    assert error.errors == errors
    assert error.reason == "max tries"
    assert error.title == "operation"
    assert error.last_error is errors[1]


def test_retry_error_copies_errors() -> None:
    errors = [ValueError("a")]
    error = RetryError(errors, "errors")
    errors.append(ValueError("b"))
    assert len(error.errors) == 1


def test_retry_error_message() -> None:
    assert str(RetryError([], "deadline", title="GET /users")) == (
        "GET /users failed after 0 attempt(s) (deadline)"
    )


def test_retry_error_last_error_empty() -> None:
    assert RetryError([], "cancelled").last_error is None


def test_retry_error_is_not_resumable() -> None:
    assert not is_resumable(RetryError([], "errors"))


######################################
#     Tests for HttpRequestError     #
######################################


def test_http_request_error_attributes() -> None:
    response = httpx.Response(404)
    error = HttpRequestError(
        method="GET",
        url=TEST_URL,
        message="not found",
        status_code=404,
        response=response,
        resumable=False,
    )
    assert str(error) == "not found"
    assert error.method == "GET"
    assert error.url == TEST_URL
    assert error.message == "not found"
    assert error.status_code == 404
    assert error.response is response
    assert not error.resumable
    assert not is_resumable(error)


def test_http_request_error_defaults() -> None:
    error = HttpRequestError(method="POST", url=TEST_URL, message="failed")
    assert error.status_code is None
    assert error.response is None
    assert error.resumable
    assert error.__cause__ is None


def test_http_request_error_cause() -> None:
    cause = httpx.ConnectError("refused")
    error = HttpRequestError(method="GET", url=TEST_URL, message="failed", cause=cause)
    assert error.__cause__ is cause


def test_http_request_error_repr() -> None:
    error = HttpRequestError(
        method="GET", url=TEST_URL, message="x", status_code=500, resumable=True
    )
    assert repr(error) == (
        "HttpRequestError(method='GET', url='https://api.example.com/data', "
        "status_code=500, resumable=True)"
    )


def test_response_validation_error_is_http_request_error() -> None:
    error = ResponseValidationError(method="GET", url=TEST_URL, message="bad", resumable=False)
    assert isinstance(error, HttpRequestError)
    assert not is_resumable(error)
