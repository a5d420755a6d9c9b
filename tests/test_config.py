"""
Tests for environment-driven settings and gateway wiring.

Test plan:
- Defaults when the environment is empty
- Every variable read and parsed
- Invalid values raise ValueError naming the variable
- build_gateway uses an injected client or a JsonRpcClient over httpx
"""

from pathlib import Path

import pytest

from fakes import FakeLedgerClient
from xrpl_credentials.config import (
    DEFAULT_CREDENTIAL_TYPE,
    DEFAULT_RPC_URL,
    Settings,
    build_gateway,
    load_settings,
    open_store,
)
from xrpl_credentials.jsonrpc_client import JsonRpcClient
from xrpl_credentials.store import KeyValueStore


class TestLoadSettings:
    def test_defaults(self) -> None:
        settings = load_settings({})
        assert settings == Settings()
        assert settings.rpc_url == DEFAULT_RPC_URL
        assert settings.credential_type == DEFAULT_CREDENTIAL_TYPE
        assert settings.issuer_address is None

    def test_all_variables(self) -> None:
        settings = load_settings(
            {
                "XRPL_RPC_URL": "http://localhost:5005",
                "XRPL_TIMEOUT": "5",
                "XRPL_POLL_INTERVAL": "0.5",
                "XRPL_MAX_POLLS": "3",
                "CREDENTIAL_TYPE": "KYC",
                "ISSUER_ADDRESS": " rIssuer ",
                "VERIFIER_ADDRESS": "rVerifier",
                "CREDENTIAL_STORE": "/tmp/x.db",
            }
        )
        assert settings == Settings(
            rpc_url="http://localhost:5005",
            timeout=5.0,
            poll_interval=0.5,
            max_polls=3,
            credential_type="KYC",
            issuer_address="rIssuer",
            verifier_address="rVerifier",
            credential_store="/tmp/x.db",
        )

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("XRPL_RPC_URL", "ws://localhost:6006"),
            ("XRPL_TIMEOUT", "soon"),
            ("XRPL_TIMEOUT", "0"),
            ("XRPL_POLL_INTERVAL", "-1"),
            ("XRPL_MAX_POLLS", "2.5"),
            ("XRPL_MAX_POLLS", "0"),
            ("CREDENTIAL_TYPE", "x" * 65),
        ],
    )
    def test_invalid(self, name: str, value: str) -> None:
        with pytest.raises(ValueError, match=name):
            load_settings({name: value})

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("XRPL_MAX_POLLS", "7")
        assert load_settings().max_polls == 7


class TestWiring:
    def test_injected_client(self) -> None:
        client = FakeLedgerClient()
        gateway = build_gateway(Settings(poll_interval=0), client=client)
        assert gateway.client is client

    def test_default_client(self) -> None:
        gateway = build_gateway(Settings(rpc_url="http://localhost:5005", timeout=2.0))
        assert isinstance(gateway.client, JsonRpcClient)
        assert gateway.client.url == "http://localhost:5005"

    def test_open_store(self, tmp_path: Path) -> None:
        store = open_store(Settings(credential_store=str(tmp_path / "kv.db")))
        assert isinstance(store, KeyValueStore)
