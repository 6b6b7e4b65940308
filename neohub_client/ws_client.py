"""WebSocket client wrapper for the NeoHub command queue."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from websockets.asyncio.client import ClientConnection
from websockets.exceptions import ConnectionClosed, WebSocketException

from .errors import NeoHubConnectionError
from .tls import TrustPolicy
from .ws import connect_websocket


class NeoHubWsMessageType(Enum):
    """Normalized WebSocket message types."""

    TEXT = "text"
    CLOSED = "closed"
    ERROR = "error"


@dataclass(frozen=True)
class NeoHubWsMessage:
    """Normalized WebSocket message payload."""

    type: NeoHubWsMessageType
    data: str | None = None


class NeoHubWsClient:
    """Wrapper around websockets library for the hub connection."""

    def __init__(self) -> None:
        self._ws: ClientConnection | None = None

    @property
    def connected(self) -> bool:
        """Whether a connection has been opened and not yet closed."""
        return self._ws is not None

    async def connect(
        self,
        url: str,
        *,
        trust: TrustPolicy | None = None,
        ping_interval: int | None = 20,
        timeout: float = 15.0,
    ) -> None:
        """Connect to the hub websocket."""
        self._ws = await connect_websocket(
            url,
            trust=trust,
            ping_interval=ping_interval,
            timeout=timeout,
        )

    async def close(self) -> None:
        """Close the websocket connection."""
        if self._ws is not None:
            ws, self._ws = self._ws, None
            await ws.close()

    async def send_text(self, text: str) -> None:
        """Send one text frame; returns once the frame is written."""
        if self._ws is None:
            raise NeoHubConnectionError("WebSocket is not connected")
        try:
            await self._ws.send(text)
        except ConnectionClosed as err:
            raise NeoHubConnectionError("WebSocket closed while sending") from err
        except (OSError, WebSocketException) as err:
            raise NeoHubConnectionError(f"WebSocket send failed: {err}") from err

    async def receive(self) -> NeoHubWsMessage:
        """Wait for the next frame and normalize it."""
        if self._ws is None:
            raise NeoHubConnectionError("WebSocket is not connected")
        try:
            msg = await self._ws.recv()
        except ConnectionClosed:
            return NeoHubWsMessage(type=NeoHubWsMessageType.CLOSED)
        except (OSError, WebSocketException) as err:
            return NeoHubWsMessage(type=NeoHubWsMessageType.ERROR, data=str(err))
        return self._normalize_message(msg)

    @staticmethod
    def _normalize_message(msg: Any) -> NeoHubWsMessage:
        """Normalize backend-specific frames into NeoHubWsMessage."""
        if isinstance(msg, bytes):
            try:
                return NeoHubWsMessage(NeoHubWsMessageType.TEXT, msg.decode("utf-8"))
            except UnicodeDecodeError:
                return NeoHubWsMessage(
                    NeoHubWsMessageType.ERROR, "binary frame is not UTF-8 text"
                )
        if isinstance(msg, str):
            return NeoHubWsMessage(NeoHubWsMessageType.TEXT, msg)

        # Fallback: treat unknown objects as text via their string repr
        return NeoHubWsMessage(NeoHubWsMessageType.TEXT, str(msg))
