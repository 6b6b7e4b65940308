"""Client for the NeoHub command-queue websocket protocol."""

__version__ = "0.1.0"

from .builder import NeoHubBuilder
from .config import NeoHubConfig
from .errors import (
    NeoHubClientError,
    NeoHubConfigError,
    NeoHubConnectionError,
    NeoHubHandshakeError,
    NeoHubPayloadError,
    NeoHubProtocolError,
    NeoHubSessionError,
    NeoHubTimeout,
)
from .models import Identity, Profile, ProfileInfo, ProfileInfoDay
from .protocol import (
    build_command_frame,
    build_string_command,
    build_void_command,
    parse_command_response,
)
from .session import NeoHubSession
from .tls import AcceptAnyCertificate, TrustPolicy, VerifyCertificates
from .ws import connect_websocket
from .ws_client import NeoHubWsClient, NeoHubWsMessage, NeoHubWsMessageType

__all__ = [
    "AcceptAnyCertificate",
    "Identity",
    "NeoHubBuilder",
    "NeoHubClientError",
    "NeoHubConfig",
    "NeoHubConfigError",
    "NeoHubConnectionError",
    "NeoHubHandshakeError",
    "NeoHubPayloadError",
    "NeoHubProtocolError",
    "NeoHubSession",
    "NeoHubSessionError",
    "NeoHubTimeout",
    "NeoHubWsClient",
    "NeoHubWsMessage",
    "NeoHubWsMessageType",
    "Profile",
    "ProfileInfo",
    "ProfileInfoDay",
    "TrustPolicy",
    "VerifyCertificates",
    "__version__",
    "build_command_frame",
    "build_string_command",
    "build_void_command",
    "connect_websocket",
    "parse_command_response",
]
