"""Client error types for NeoHub command-queue interactions."""

from __future__ import annotations

from typing import Any


class NeoHubClientError(Exception):
    """Base error for NeoHub client failures."""


class NeoHubConfigError(NeoHubClientError):
    """Required connection setting is missing or invalid."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key


class NeoHubTimeout(NeoHubClientError):
    """Timeout while communicating with the hub."""


class NeoHubConnectionError(NeoHubClientError):
    """Network connection to the hub failed or was lost."""


class NeoHubHandshakeError(NeoHubClientError):
    """WebSocket or TLS handshake failed."""


class NeoHubProtocolError(NeoHubClientError):
    """Hub reply violates the command-queue envelope contract."""

    def __init__(self, message: str, payload: Any) -> None:
        super().__init__(f"{message}: {payload!r}")
        self.payload = payload


class NeoHubPayloadError(NeoHubClientError):
    """Command result does not match the expected shape."""

    def __init__(self, message: str, raw: str) -> None:
        super().__init__(f"{message}: {raw!r}")
        self.raw = raw


class NeoHubSessionError(NeoHubClientError):
    """Operation is not valid in the session's current state."""

    def __init__(self, state: str, message: str) -> None:
        super().__init__(message)
        self.state = state
