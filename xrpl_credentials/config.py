"""
Environment-driven settings and gateway wiring.

Settings are read once by ``load_settings()`` and passed explicitly;
nothing in the package reads the environment on its own.

Variables:
    XRPL_RPC_URL        rippled JSON-RPC endpoint (default: devnet)
    XRPL_TIMEOUT        HTTP timeout, seconds (default 30)
    XRPL_POLL_INTERVAL  seconds between validation polls (default 1)
    XRPL_MAX_POLLS      polls before SubmissionPending (default 20)
    CREDENTIAL_TYPE     credential type used by the workflow
    ISSUER_ADDRESS      r-address of the trusted issuer (optional)
    VERIFIER_ADDRESS    r-address of the verifying account (optional)
    CREDENTIAL_STORE    SQLite path for the handoff store
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from xrpl_credentials.client import XRPLClient
from xrpl_credentials.jsonrpc_client import JsonRpcClient
from xrpl_credentials.ledger import XRPLGateway
from xrpl_credentials.store import KeyValueStore
from xrpl_credentials.transport import HttpxTransport

DEFAULT_RPC_URL = "https://s.devnet.rippletest.net:51234/"
DEFAULT_CREDENTIAL_TYPE = "XRPLCommunityExamCertification"
DEFAULT_CREDENTIAL_STORE = "credentials.db"


@dataclass(frozen=True)
class Settings:
    rpc_url: str = DEFAULT_RPC_URL
    timeout: float = 30.0
    poll_interval: float = 1.0
    max_polls: int = 20
    credential_type: str = DEFAULT_CREDENTIAL_TYPE
    issuer_address: str | None = None
    verifier_address: str | None = None
    credential_store: str = DEFAULT_CREDENTIAL_STORE


def _float(env: Mapping[str, str], name: str, default: float, *, minimum: float) -> float:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number (got {raw!r})") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum} (got {raw!r})")
    return value


def _int(env: Mapping[str, str], name: str, default: int, *, minimum: int) -> int:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from None
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum} (got {raw!r})")
    return value


def load_settings(environ: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from ``environ`` (defaults to ``os.environ``).

    Raises:
        ValueError: Naming the first variable with an invalid value.
    """
    env = os.environ if environ is None else environ

    rpc_url = env.get("XRPL_RPC_URL", "").strip() or DEFAULT_RPC_URL
    if not rpc_url.startswith(("http://", "https://")):
        raise ValueError(f"XRPL_RPC_URL must be an http(s) URL (got {rpc_url!r})")

    credential_type = env.get("CREDENTIAL_TYPE", "").strip() or DEFAULT_CREDENTIAL_TYPE
    if len(credential_type.encode("utf-8")) > 64:
        raise ValueError(f"CREDENTIAL_TYPE exceeds 64 bytes (got {credential_type!r})")

    return Settings(
        rpc_url=rpc_url,
        timeout=_float(env, "XRPL_TIMEOUT", 30.0, minimum=0.001),
        poll_interval=_float(env, "XRPL_POLL_INTERVAL", 1.0, minimum=0.0),
        max_polls=_int(env, "XRPL_MAX_POLLS", 20, minimum=1),
        credential_type=credential_type,
        issuer_address=env.get("ISSUER_ADDRESS", "").strip() or None,
        verifier_address=env.get("VERIFIER_ADDRESS", "").strip() or None,
        credential_store=env.get("CREDENTIAL_STORE", "").strip() or DEFAULT_CREDENTIAL_STORE,
    )


def build_gateway(settings: Settings, client: XRPLClient | None = None) -> XRPLGateway:
    """Wire an XRPLGateway from settings.

    Args:
        settings: Loaded settings.
        client: Override the network client (tests inject a fake here).
    """
    if client is None:
        client = JsonRpcClient(settings.rpc_url, HttpxTransport(timeout=settings.timeout))
    return XRPLGateway(
        client,
        poll_interval=settings.poll_interval,
        max_polls=settings.max_polls,
    )


def open_store(settings: Settings) -> KeyValueStore:
    return KeyValueStore(settings.credential_store)
