"""Builder that turns connection parameters into a live session."""

from __future__ import annotations

import dataclasses
import logging
import math
from urllib.parse import urlsplit

from .config import NeoHubConfig
from .session import NeoHubSession
from .tls import TrustPolicy
from .ws_client import NeoHubWsClient

_LOGGER = logging.getLogger(__name__)


class NeoHubBuilder:
    """Collects connection parameters before connecting.

    Usage:
        session = await NeoHubBuilder.from_env().timeout(5).connect()
    """

    def __init__(self, url: str, token: str) -> None:
        self._config = NeoHubConfig(url=url, token=token)

    @classmethod
    def from_config(cls, config: NeoHubConfig) -> NeoHubBuilder:
        builder = cls(config.url, config.token)
        builder._config = config
        return builder

    @classmethod
    def from_env(cls) -> NeoHubBuilder:
        """Read NEOHUB_URL and NEOHUB_TOKEN; fails before any network access."""
        return cls.from_config(NeoHubConfig.from_env())

    @property
    def config(self) -> NeoHubConfig:
        return self._config

    def timeout(self, seconds: float) -> NeoHubBuilder:
        """Override the per-exchange timeout (default 15s)."""
        if not math.isfinite(seconds) or seconds <= 0:
            raise ValueError(f"timeout must be positive and finite, got {seconds}")
        self._config = dataclasses.replace(self._config, timeout=seconds)
        return self

    def trust(self, policy: TrustPolicy) -> NeoHubBuilder:
        """Override the TLS trust policy."""
        self._config = dataclasses.replace(self._config, trust=policy)
        return self

    async def connect(self) -> NeoHubSession:
        """Open the websocket and return a connected session.

        Raises:
            NeoHubTimeout: Connection not established within the timeout
            NeoHubHandshakeError: WebSocket or TLS handshake failed
            NeoHubConnectionError: Network connection failed
        """
        config = self._config
        name = urlsplit(config.url).hostname or config.url

        _LOGGER.info("[%s] Connecting to %s", name, config.url)
        ws = NeoHubWsClient()
        await ws.connect(config.url, trust=config.trust, timeout=config.timeout)
        _LOGGER.info("[%s] Connected", name)

        return NeoHubSession(ws, config.token, timeout=config.timeout, name=name)
