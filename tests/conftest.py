"""Pytest configuration and fixtures for stdsdk tests."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest


@pytest.fixture
def mock_session() -> MagicMock:
    """Create a mock aiohttp ClientSession."""
    import aiohttp

    return MagicMock(spec=aiohttp.ClientSession)


def create_mock_response(
    status: int = 200,
    read_data: bytes = b"",
) -> AsyncMock:
    """Create a configured mock response.

    Args:
        status: HTTP status code
        read_data: Data to return from read() call

    Returns:
        Configured AsyncMock response
    """
    response = AsyncMock()
    response.status = status
    response.read.return_value = read_data

    response.__aenter__.return_value = response
    response.__aexit__.return_value = None

    return response


class FakeConnection:
    """Stand-in for a websockets ClientConnection.

    Yields ``frames`` when iterated, then raises ``error`` if given. With
    ``block=True`` iteration waits forever once the frames run out.
    """

    def __init__(
        self,
        frames: list[str | bytes] | None = None,
        *,
        error: Exception | None = None,
        block: bool = False,
    ) -> None:
        self._frames = list(frames or [])
        self._error = error
        self._block = block
        self.send = AsyncMock()
        self.close = AsyncMock()

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._frames:
            return self._frames.pop(0)
        if self._error is not None:
            raise self._error
        if self._block:
            await asyncio.Event().wait()
        raise StopAsyncIteration
