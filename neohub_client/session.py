"""Command session for a connected NeoHub.

A session owns one websocket and issues commands strictly one at a time:
each command frame is written and the next inbound frame is taken as its
reply. The hub offers no multiplexing and the correlation tag is constant,
so concurrent callers are queued on a lock rather than interleaved.

States:
- "connected": commands may be issued
- "failed": a timeout, transport or protocol error left the stream in an
  unknown position relative to the hub; only ``disconnect`` is allowed
- "closed": terminal

Usage:
    session = await NeoHubBuilder(url, token).connect()
    identity = await session.identify()
    profiles = await session.command_void("GET_PROFILES")
    await session.disconnect()
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from types import TracebackType
from typing import Any, TypeVar

from .config import DEFAULT_TIMEOUT
from .errors import (
    NeoHubConnectionError,
    NeoHubProtocolError,
    NeoHubSessionError,
    NeoHubTimeout,
)
from .models import FIRMWARE_COMMAND, Identity
from .protocol import (
    CommandResponse,
    build_command_frame,
    build_string_command,
    build_void_command,
    decode_result,
    parse_command_response,
)
from .ws_client import NeoHubWsClient, NeoHubWsMessageType

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class NeoHubSession:
    """Request/response session over a single hub connection."""

    def __init__(
        self,
        ws: NeoHubWsClient,
        token: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        name: str = "neohub",
    ) -> None:
        """Initialize session.

        Args:
            ws: Connected websocket client, owned by the session from now on
            token: Hub API token
            timeout: Budget for each exchange and for the close handshake
            name: Label used in log messages
        """
        self.name = name
        self.device_id: str | None = None

        self._ws = ws
        self._token = token
        self._timeout = timeout
        self._state = "connected"
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> NeoHubSession:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc is None:
            await self.disconnect()
            return
        try:
            await self.disconnect()
        except NeoHubTimeout as err:
            # Keep the exception that is already unwinding the block.
            _LOGGER.warning("[%s] %s", self.name, err)

    @property
    def state(self) -> str:
        """Get current session state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """Check if commands may be issued."""
        return self._state == "connected"

    @property
    def timeout(self) -> float:
        """Timeout budget in seconds."""
        return self._timeout

    # -------------------------------------------------------------------------
    # Public API: Commands
    # -------------------------------------------------------------------------

    async def exchange(self, command: str) -> tuple[str, str]:
        """Send one command and wait for its reply.

        A single timeout budget covers writing the frame and receiving the
        reply. Any failure is fatal to the session.

        Args:
            command: Command text placed in the COMMAND field

        Returns:
            Tuple of the hub device id and the still-encoded result text

        Raises:
            NeoHubSessionError: Session is not connected
            NeoHubTimeout: No reply within the timeout
            NeoHubConnectionError: Stream closed or errored
            NeoHubProtocolError: Reply malformed or not matching the command
        """
        async with self._lock:
            if self._state != "connected":
                raise NeoHubSessionError(
                    self._state, f"Cannot send command: session is {self._state}"
                )

            try:
                reply = await asyncio.wait_for(
                    self._exchange(command), timeout=self._timeout
                )
            except TimeoutError as err:
                _LOGGER.warning(
                    "[%s] No reply within %.1fs, session unusable",
                    self.name,
                    self._timeout,
                )
                self._set_state("failed")
                raise NeoHubTimeout(
                    f"No reply to command within {self._timeout}s"
                ) from err
            except (NeoHubConnectionError, NeoHubProtocolError) as err:
                _LOGGER.warning("[%s] Command failed: %s", self.name, err)
                self._set_state("failed")
                raise
            except asyncio.CancelledError:
                # A reply may still arrive and would be read as the next one.
                self._set_state("failed")
                raise

            self.device_id = reply.device_id
            return reply.device_id, reply.response

    async def command_void(
        self, command: str, result_type: Callable[[Any], T] | None = None
    ) -> Any:
        """Run a command without argument and decode its result.

        Raises:
            NeoHubPayloadError: Result does not fit ``result_type``
        """
        _, raw = await self.exchange(build_void_command(command))
        return decode_result(raw, result_type)

    async def command_str(
        self,
        command: str,
        argument: str,
        result_type: Callable[[Any], T] | None = None,
    ) -> Any:
        """Run a command taking one string argument and decode its result.

        Raises:
            NeoHubPayloadError: Result does not fit ``result_type``
        """
        _, raw = await self.exchange(build_string_command(command, argument))
        return decode_result(raw, result_type)

    async def identify(self) -> Identity:
        """Query the hub's device id and firmware version."""
        device_id, raw = await self.exchange(build_void_command(FIRMWARE_COMMAND))
        identity = Identity.from_firmware_response(device_id, decode_result(raw))
        _LOGGER.debug(
            "[%s] Hub %s firmware %s",
            self.name,
            identity.device_id,
            identity.firmware_version or "unknown",
        )
        return identity

    # -------------------------------------------------------------------------
    # Public API: Lifecycle
    # -------------------------------------------------------------------------

    async def disconnect(self) -> None:
        """Close the connection; the session cannot be used afterwards.

        Raises:
            NeoHubTimeout: Close handshake not acknowledged within the timeout
        """
        if self._state == "closed":
            return

        _LOGGER.info("[%s] Disconnecting", self.name)
        self._set_state("closed")
        try:
            await asyncio.wait_for(self._ws.close(), timeout=self._timeout)
        except TimeoutError as err:
            raise NeoHubTimeout("Timed out waiting for close handshake") from err

    # -------------------------------------------------------------------------
    # Internal
    # -------------------------------------------------------------------------

    def _set_state(self, state: str) -> None:
        if self._state == "closed":
            return
        if self._state != state:
            _LOGGER.debug("[%s] State: %s → %s", self.name, self._state, state)
            self._state = state

    async def _exchange(self, command: str) -> CommandResponse:
        # The token is part of the frame, so only the command text is logged.
        _LOGGER.debug("[%s] Sending command: %s", self.name, command)
        await self._ws.send_text(build_command_frame(self._token, command))

        msg = await self._ws.receive()
        if msg.type is NeoHubWsMessageType.CLOSED:
            raise NeoHubConnectionError("Connection closed before reply")
        if msg.type is NeoHubWsMessageType.ERROR:
            raise NeoHubConnectionError(f"WebSocket error awaiting reply: {msg.data}")

        _LOGGER.debug("[%s] Received: %s", self.name, msg.data)
        return parse_command_response(msg.data or "")
