"""Connection settings for a NeoHub.

Settings come from explicit arguments, the environment
(``NEOHUB_URL``, ``NEOHUB_TOKEN`` and optionally ``NEOHUB_TIMEOUT``,
``NEOHUB_CAFILE``) or a YAML file. All validation happens here, before any
network activity.
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .errors import NeoHubConfigError
from .tls import AcceptAnyCertificate, TrustPolicy, VerifyCertificates

DEFAULT_TIMEOUT = 15.0

ENV_URL = "NEOHUB_URL"
ENV_TOKEN = "NEOHUB_TOKEN"
ENV_TIMEOUT = "NEOHUB_TIMEOUT"
ENV_CAFILE = "NEOHUB_CAFILE"


def _parse_timeout(value: Any, key: str) -> float:
    if isinstance(value, bool):
        raise NeoHubConfigError(key, f"{key} must be a number of seconds")
    try:
        seconds = float(value)
    except (TypeError, ValueError) as err:
        raise NeoHubConfigError(
            key, f"{key} must be a number of seconds, got {value!r}"
        ) from err
    if not math.isfinite(seconds) or seconds <= 0:
        raise NeoHubConfigError(
            key, f"{key} must be a positive finite number, got {seconds}"
        )
    return seconds


@dataclass(frozen=True)
class NeoHubConfig:
    """Connection parameters for one hub.

    Attributes:
        url: Websocket URL, e.g. ``wss://192.168.1.20:4243``.
        token: Hub API token.
        timeout: Seconds allowed per command exchange and for disconnect.
        trust: TLS trust policy; accepts any certificate by default.
    """

    url: str
    token: str
    timeout: float = DEFAULT_TIMEOUT
    trust: TrustPolicy = field(default_factory=AcceptAnyCertificate)

    def __post_init__(self) -> None:
        if not self.url:
            raise NeoHubConfigError("url", "Hub URL is required")
        if not self.token:
            raise NeoHubConfigError("token", "Hub token is required")
        object.__setattr__(self, "timeout", _parse_timeout(self.timeout, "timeout"))

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> NeoHubConfig:
        """Load settings from environment variables.

        Raises:
            NeoHubConfigError: NEOHUB_URL or NEOHUB_TOKEN is unset or empty,
                or an optional value is invalid.
        """
        env = os.environ if environ is None else environ

        def required(key: str) -> str:
            value = env.get(key)
            if not value:
                raise NeoHubConfigError(key, f"env var required: {key!r}")
            return value

        url = required(ENV_URL)
        token = required(ENV_TOKEN)

        timeout = DEFAULT_TIMEOUT
        if env.get(ENV_TIMEOUT):
            timeout = _parse_timeout(env[ENV_TIMEOUT], ENV_TIMEOUT)

        trust: TrustPolicy = AcceptAnyCertificate()
        if env.get(ENV_CAFILE):
            trust = VerifyCertificates(cafile=env[ENV_CAFILE])

        return cls(url=url, token=token, timeout=timeout, trust=trust)

    @classmethod
    def from_yaml(cls, path: str | Path) -> NeoHubConfig:
        """Load settings from a YAML file.

        Expected keys: ``url``, ``token`` and optionally ``timeout``,
        ``verify_tls`` (bool) and ``cafile``. Setting ``cafile`` implies
        verification.
        """
        path = Path(path)
        try:
            with path.open() as f:
                data = yaml.safe_load(f) or {}
        except OSError as err:
            raise NeoHubConfigError(
                str(path), f"Cannot read config file {path}: {err}"
            ) from err
        except yaml.YAMLError as err:
            raise NeoHubConfigError(
                str(path), f"Invalid YAML in {path}: {err}"
            ) from err

        if not isinstance(data, dict):
            raise NeoHubConfigError(str(path), f"Config file {path} must be a mapping")

        for key in ("url", "token"):
            if not data.get(key):
                raise NeoHubConfigError(key, f"{key!r} is required in {path}")

        cafile = data.get("cafile")
        trust: TrustPolicy = AcceptAnyCertificate()
        if cafile or data.get("verify_tls", False):
            trust = VerifyCertificates(cafile=str(cafile) if cafile else None)

        return cls(
            url=str(data["url"]),
            token=str(data["token"]),
            timeout=_parse_timeout(data.get("timeout", DEFAULT_TIMEOUT), "timeout"),
            trust=trust,
        )
