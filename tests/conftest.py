"""Pytest configuration and fixtures for neohub_client tests."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from neohub_client.protocol import build_command_response, decode_command_frame
from neohub_client.session import NeoHubSession
from neohub_client.ws_client import NeoHubWsClient

HUB_DEVICE_ID = "00:11:22:33:44:55"
HUB_TOKEN = "abc123"


class FakeHubConnection:
    """Stand-in for a websockets ClientConnection.

    Frames queued with ``push`` are returned by ``recv`` in order; an
    exception instance is raised instead of returned. When ``responder`` is
    set, every sent frame is passed to it and a non-None result is queued as
    the reply.
    """

    def __init__(self) -> None:
        self.sent: list[str] = []
        self.closed = False
        self.close_delay: float = 0.0
        self.responder: Callable[[str], Any] | None = None
        self._inbox: asyncio.Queue[Any] = asyncio.Queue()

    def push(self, frame: Any) -> None:
        self._inbox.put_nowait(frame)

    async def send(self, message: str) -> None:
        self.sent.append(message)
        if self.responder is not None:
            reply = self.responder(message)
            if reply is not None:
                self.push(reply)

    async def recv(self) -> Any:
        item = await self._inbox.get()
        if isinstance(item, BaseException):
            raise item
        return item

    async def close(self) -> None:
        if self.close_delay:
            await asyncio.sleep(self.close_delay)
        self.closed = True


def firmware_responder(version: str | None = "1.2.3") -> Callable[[str], str]:
    """Reply to any command frame with a FIRMWARE-style result."""

    def respond(frame: str) -> str:
        decode_command_frame(frame)
        payload = {"HUB_TYPE": 2}
        if version is not None:
            payload["firmware version"] = version
        return build_command_response(HUB_DEVICE_ID, payload)

    return respond


@pytest.fixture
def fake_hub() -> FakeHubConnection:
    """Create a scripted hub connection."""
    return FakeHubConnection()


@pytest.fixture
def ws_client(fake_hub: FakeHubConnection) -> NeoHubWsClient:
    """Create a websocket client already attached to the fake hub."""
    client = NeoHubWsClient()
    client._ws = fake_hub  # type: ignore[assignment]
    return client


@pytest.fixture
def session(ws_client: NeoHubWsClient) -> NeoHubSession:
    """Create a connected session with a short timeout."""
    return NeoHubSession(ws_client, HUB_TOKEN, timeout=0.2, name="test-hub")
