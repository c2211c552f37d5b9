"""Tests for the client exception hierarchy."""

import pytest

from wgclient.exceptions import (
    AuthFormatExhausted,
    CallbackError,
    NetworkError,
    ServerError,
    SessionExpired,
    StorageError,
    ValidationError,
    WgClientError,
    describe_error,
)


@pytest.mark.parametrize(
    ("error_cls", "expected"),
    [
        (SessionExpired, "Session expired; authenticate again"),
        (NetworkError, "Network communication error"),
        (StorageError, "Session storage error"),
        (CallbackError, "Poller callback failed"),
        (ValidationError, "Input validation failed"),
    ],
)
def test_default_messages(error_cls, expected):
    assert str(error_cls()) == expected


def test_kwargs_become_attributes():
    error = NetworkError("boom", operation="list_peers")
    assert error.operation == "list_peers"
    assert str(error) == "boom"


def test_validation_error_is_value_error():
    assert issubclass(ValidationError, ValueError)
    assert issubclass(ValidationError, WgClientError)


def test_auth_format_exhausted_keeps_attempts():
    error = AuthFormatExhausted(attempts=["a", "b", "c"])
    assert error.attempts == ("a", "b", "c")
    assert "3 login formats" in str(error)


def test_server_error_carries_status_and_message():
    error = ServerError(503, "maintenance")
    assert error.status_code == 503
    assert error.message == "maintenance"
    assert str(error) == "Server returned HTTP 503: maintenance"


def test_server_error_without_message():
    error = ServerError(500)
    assert str(error) == "Server returned HTTP 500"


def test_describe_error():
    assert describe_error(None) is None
    assert describe_error(NetworkError("down")) == "NetworkError: down"
