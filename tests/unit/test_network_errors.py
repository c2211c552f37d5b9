"""Tests for transport error classification."""

import asyncio
import socket

import aiohttp
import pytest

from wgclient.exceptions import NetworkError
from wgclient.network_errors import is_network_unreachable_error, to_network_error


@pytest.mark.parametrize(
    "exc",
    [
        asyncio.TimeoutError(),
        socket.gaierror("name resolution failed"),
        ConnectionRefusedError("refused"),
        aiohttp.ServerDisconnectedError(),
    ],
)
def test_network_errors_are_recognised(exc):
    assert is_network_unreachable_error(exc) is True


def test_value_error_is_not_network():
    assert is_network_unreachable_error(ValueError("bad")) is False


def test_os_error_attribute_is_recognised():
    class Wrapped(Exception):
        os_error = OSError("socket closed")

    assert is_network_unreachable_error(Wrapped()) is True


def test_to_network_error_for_timeout():
    original = asyncio.TimeoutError()
    error = to_network_error(original, operation="list_peers")
    assert isinstance(error, NetworkError)
    assert str(error) == "list_peers failed: timed out"
    assert error.operation == "list_peers"
    assert error.__cause__ is original


def test_to_network_error_keeps_message():
    error = to_network_error(ConnectionRefusedError("refused"), operation="probe")
    assert str(error) == "probe failed: refused"
