"""WebSocket handshake helpers."""

from __future__ import annotations

import asyncio
import ssl
from collections.abc import Mapping

import websockets
from websockets.asyncio.client import ClientConnection
from websockets.exceptions import (
    InvalidHandshake,
    InvalidURI,
    WebSocketException,
)
from yarl import URL

from .errors import (
    SdkConnectionError,
    SdkHandshakeError,
    SdkTimeout,
)
from .request import base_url


def websocket_url(endpoint: URL, path: str, querystring: str = "") -> str:
    """Build the ``wss://`` URL for a path below the endpoint, credentials stripped."""
    url = "wss" + base_url(endpoint)[len(endpoint.scheme) :] + path
    if querystring:
        url = f"{url}?{querystring}"
    return url


def ssl_context(verify: bool = True) -> ssl.SSLContext:
    """Create the TLS context used for secure websocket connections."""
    context = ssl.create_default_context()
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


async def connect_websocket(
    url: str,
    *,
    headers: Mapping[str, str] | None = None,
    verify_ssl: bool = True,
    ping_interval: int | None = 20,
    timeout: float = 15.0,
) -> ClientConnection:
    """Open a WebSocket connection.

    Args:
        url: Target ``ws://`` or ``wss://`` URL
        headers: Extra handshake headers
        verify_ssl: Verify the server certificate for ``wss://``
        ping_interval: Interval for ping frames
        timeout: Handshake timeout
    """
    try:
        return await asyncio.wait_for(
            websockets.connect(
                url,
                additional_headers=dict(headers or {}),
                ssl=ssl_context(verify_ssl) if url.startswith("wss://") else None,
                ping_interval=ping_interval,
                close_timeout=5,
                max_size=None,
            ),
            timeout=timeout,
        )
    except TimeoutError as err:
        raise SdkTimeout("WebSocket connection timed out") from err
    except (InvalidHandshake, InvalidURI) as err:
        raise SdkHandshakeError(f"WebSocket handshake failed: {err}") from err
    except (OSError, WebSocketException) as err:
        raise SdkConnectionError(f"WebSocket connection failed: {err}") from err
