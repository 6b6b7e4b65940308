"""TLS trust policies for the hub websocket.

Hubs serve a self-signed certificate on the local network, so the default
policy accepts any certificate. That policy is INSECURE: it offers no
protection against an active attacker on the network. Pass
``VerifyCertificates`` to the builder to check the hub against a CA bundle.
"""

from __future__ import annotations

import logging
import ssl
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

_LOGGER = logging.getLogger(__name__)


@runtime_checkable
class TrustPolicy(Protocol):
    """Produces the SSL context used for ``wss://`` connections."""

    def ssl_context(self) -> ssl.SSLContext:
        """Return a client-side SSL context."""
        ...


@dataclass(frozen=True)
class AcceptAnyCertificate:
    """Accept every server certificate without verification (INSECURE)."""

    def ssl_context(self) -> ssl.SSLContext:
        _LOGGER.warning(
            "TLS certificate verification is disabled for the hub connection"
        )
        ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
        # check_hostname must be cleared before verify_mode can drop to CERT_NONE
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        return ctx


@dataclass(frozen=True)
class VerifyCertificates:
    """Verify the hub certificate against the system store or a pinned CA.

    Attributes:
        cafile: Optional path to a PEM bundle.
        cadata: Optional PEM text of a CA certificate.
        check_hostname: Whether the certificate must match the URL host.
    """

    cafile: str | None = None
    cadata: str | None = None
    check_hostname: bool = True

    def ssl_context(self) -> ssl.SSLContext:
        if self.cafile is None and self.cadata is None:
            ctx = ssl.create_default_context()
        else:
            ctx = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
            ctx.load_verify_locations(cafile=self.cafile, cadata=self.cadata)
        ctx.check_hostname = self.check_hostname
        return ctx
