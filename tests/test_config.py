"""Tests for connection settings and the session builder."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, patch

import pytest

from neohub_client import NeoHubBuilder, NeoHubConfig
from neohub_client.errors import NeoHubConfigError, NeoHubConnectionError
from neohub_client.tls import AcceptAnyCertificate, VerifyCertificates

ENV = {"NEOHUB_URL": "wss://192.168.1.20:4243", "NEOHUB_TOKEN": "abc123"}


class TestConfigFromEnv:
    """Tests for NeoHubConfig.from_env()."""

    def test_required_values(self) -> None:
        """Test URL and token are read with the default timeout."""
        config = NeoHubConfig.from_env(ENV)
        assert config.url == "wss://192.168.1.20:4243"
        assert config.token == "abc123"
        assert config.timeout == 15.0
        assert isinstance(config.trust, AcceptAnyCertificate)

    @pytest.mark.parametrize("missing", ["NEOHUB_URL", "NEOHUB_TOKEN"])
    def test_missing_required(self, missing: str) -> None:
        """Test a missing variable names itself in the error."""
        env = {k: v for k, v in ENV.items() if k != missing}
        with pytest.raises(NeoHubConfigError, match=missing) as exc:
            NeoHubConfig.from_env(env)
        assert exc.value.key == missing

    def test_empty_required(self) -> None:
        """Test an empty variable counts as missing."""
        with pytest.raises(NeoHubConfigError, match="NEOHUB_TOKEN"):
            NeoHubConfig.from_env({**ENV, "NEOHUB_TOKEN": ""})

    def test_optional_values(self) -> None:
        """Test timeout and CA file are honoured."""
        config = NeoHubConfig.from_env(
            {**ENV, "NEOHUB_TIMEOUT": "2.5", "NEOHUB_CAFILE": "/etc/hub-ca.pem"}
        )
        assert config.timeout == 2.5
        assert config.trust == VerifyCertificates(cafile="/etc/hub-ca.pem")

    @pytest.mark.parametrize("value", ["soon", "0", "-3", "nan", "inf"])
    def test_invalid_timeout(self, value: str) -> None:
        """Test unusable timeouts are rejected."""
        with pytest.raises(NeoHubConfigError, match="NEOHUB_TIMEOUT"):
            NeoHubConfig.from_env({**ENV, "NEOHUB_TIMEOUT": value})

    def test_reads_process_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test os.environ is used when no mapping is given."""
        monkeypatch.setenv("NEOHUB_URL", "wss://hub.local:4243")
        monkeypatch.setenv("NEOHUB_TOKEN", "from-env")
        monkeypatch.delenv("NEOHUB_TIMEOUT", raising=False)
        monkeypatch.delenv("NEOHUB_CAFILE", raising=False)

        config = NeoHubConfig.from_env()

        assert config.token == "from-env"


class TestConfigFromYaml:
    """Tests for NeoHubConfig.from_yaml()."""

    def test_load(self, tmp_path: Path) -> None:
        """Test a complete file loads."""
        path = tmp_path / "hub.yaml"
        path.write_text(
            "url: wss://192.168.1.20:4243\n"
            "token: abc123\n"
            "timeout: 5\n"
            "cafile: /etc/hub-ca.pem\n"
        )

        config = NeoHubConfig.from_yaml(path)

        assert config.url == "wss://192.168.1.20:4243"
        assert config.token == "abc123"
        assert config.timeout == 5.0
        assert config.trust == VerifyCertificates(cafile="/etc/hub-ca.pem")

    def test_verify_tls_flag(self, tmp_path: Path) -> None:
        """Test verify_tls switches to system verification."""
        path = tmp_path / "hub.yaml"
        path.write_text("url: wss://hub\ntoken: t\nverify_tls: true\n")

        assert NeoHubConfig.from_yaml(path).trust == VerifyCertificates()

    def test_missing_token(self, tmp_path: Path) -> None:
        """Test a missing key is reported."""
        path = tmp_path / "hub.yaml"
        path.write_text("url: wss://hub\n")

        with pytest.raises(NeoHubConfigError, match="token") as exc:
            NeoHubConfig.from_yaml(path)
        assert exc.value.key == "token"

    def test_nan_timeout(self, tmp_path: Path) -> None:
        """Test a YAML NaN timeout is rejected."""
        path = tmp_path / "hub.yaml"
        path.write_text("url: wss://hub\ntoken: abc123\ntimeout: .nan\n")

        with pytest.raises(NeoHubConfigError, match="finite") as exc:
            NeoHubConfig.from_yaml(path)
        assert exc.value.key == "timeout"

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        """Test a YAML list is rejected."""
        path = tmp_path / "hub.yaml"
        path.write_text("- wss://hub\n- token\n")

        with pytest.raises(NeoHubConfigError, match="mapping"):
            NeoHubConfig.from_yaml(path)

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        """Test malformed YAML is reported as a config error."""
        path = tmp_path / "hub.yaml"
        path.write_text("url: [unclosed\n")

        with pytest.raises(NeoHubConfigError, match="Invalid YAML"):
            NeoHubConfig.from_yaml(path)

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test an unreadable file is reported as a config error."""
        with pytest.raises(NeoHubConfigError, match="Cannot read"):
            NeoHubConfig.from_yaml(tmp_path / "absent.yaml")


class TestNeoHubBuilder:
    """Tests for NeoHubBuilder."""

    def test_defaults(self) -> None:
        """Test explicit arguments get the default timeout."""
        builder = NeoHubBuilder("wss://hub", "abc123")
        assert builder.config.timeout == 15.0

    def test_empty_token_rejected(self) -> None:
        """Test explicit arguments are validated too."""
        with pytest.raises(NeoHubConfigError, match="token"):
            NeoHubBuilder("wss://hub", "")

    def test_overrides(self) -> None:
        """Test timeout and trust overrides chain."""
        policy = VerifyCertificates()
        builder = NeoHubBuilder("wss://hub", "abc123").timeout(3).trust(policy)
        assert builder.config.timeout == 3.0
        assert builder.config.trust is policy

    @pytest.mark.parametrize("seconds", [0, -1.0, float("nan"), float("inf")])
    def test_invalid_timeout(self, seconds: float) -> None:
        """Test non-positive or non-finite timeouts are rejected."""
        with pytest.raises(ValueError, match="positive"):
            NeoHubBuilder("wss://hub", "abc123").timeout(seconds)

    def test_from_env_fails_before_network(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """Test missing settings fail without attempting a connection."""
        monkeypatch.delenv("NEOHUB_URL", raising=False)
        monkeypatch.setenv("NEOHUB_TOKEN", "abc123")

        with patch("neohub_client.ws_client.connect_websocket") as mock_connect:
            with pytest.raises(NeoHubConfigError, match="NEOHUB_URL"):
                NeoHubBuilder.from_env()
            mock_connect.assert_not_called()

    async def test_connect(self) -> None:
        """Test connect opens the websocket and returns a session."""
        mock_ws = AsyncMock()
        policy = VerifyCertificates()
        with patch(
            "neohub_client.ws_client.connect_websocket", return_value=mock_ws
        ) as mock_connect:
            session = (
                await NeoHubBuilder("wss://192.168.1.20:4243", "abc123")
                .timeout(4)
                .trust(policy)
                .connect()
            )

        mock_connect.assert_called_once_with(
            "wss://192.168.1.20:4243", trust=policy, ping_interval=20, timeout=4.0
        )
        assert session.is_connected
        assert session.timeout == 4.0
        assert session.name == "192.168.1.20"

    async def test_connect_failure(self) -> None:
        """Test connection errors reach the caller unchanged."""
        with patch(
            "neohub_client.ws_client.connect_websocket",
            side_effect=NeoHubConnectionError("refused"),
        ):
            with pytest.raises(NeoHubConnectionError, match="refused"):
                await NeoHubBuilder("wss://hub", "abc123").connect()
