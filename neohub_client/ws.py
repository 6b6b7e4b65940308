"""WebSocket helpers for the NeoHub command-queue transport."""

from __future__ import annotations

import asyncio
import logging
import ssl
from urllib.parse import urlsplit

import websockets
from websockets.asyncio.client import ClientConnection
from websockets.exceptions import (
    InvalidHandshake,
    InvalidURI,
    WebSocketException,
)

from .errors import (
    NeoHubConnectionError,
    NeoHubHandshakeError,
    NeoHubTimeout,
)
from .tls import AcceptAnyCertificate, TrustPolicy

_LOGGER = logging.getLogger(__name__)


async def connect_websocket(
    url: str,
    *,
    trust: TrustPolicy | None = None,
    ping_interval: int | None = 20,
    timeout: float = 15.0,
) -> ClientConnection:
    """Connect to the hub WebSocket endpoint.

    Args:
        url: ``wss://`` (or ``ws://`` for plain-text test hubs) endpoint
        trust: TLS trust policy, defaults to ``AcceptAnyCertificate``
        ping_interval: Interval for keepalive ping frames
        timeout: Connection timeout covering TCP, TLS and the upgrade
    """
    ssl_context: ssl.SSLContext | None = None
    if urlsplit(url).scheme.lower() == "wss":
        ssl_context = (trust or AcceptAnyCertificate()).ssl_context()

    _LOGGER.debug("Connecting to %s", url)
    try:
        conn = await asyncio.wait_for(
            websockets.connect(
                url,
                ssl=ssl_context,
                ping_interval=ping_interval,
                open_timeout=timeout,
                close_timeout=timeout,
                max_size=None,
            ),
            timeout=timeout,
        )
    except TimeoutError as err:
        raise NeoHubTimeout("WebSocket connection timed out") from err
    except (InvalidHandshake, InvalidURI, ssl.SSLError) as err:
        raise NeoHubHandshakeError(f"WebSocket handshake failed: {err}") from err
    except (OSError, WebSocketException) as err:
        raise NeoHubConnectionError(f"WebSocket connection failed: {err}") from err

    _LOGGER.debug("Connected to %s", url)
    return conn
