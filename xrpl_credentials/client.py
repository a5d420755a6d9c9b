"""
XRPL client protocol — the network boundary.

Defines the interface the gateway depends on, not a concrete
implementation. This keeps the services testable and keeps HTTP
details out of credential logic.

Concrete implementations:
    - JsonRpcClient (rippled JSON-RPC over an injectable transport)
    - FakeLedgerClient (tests)

The protocol has three methods:
    - submit(signed_tx_blob_hex) → SubmitResult
    - get_tx(tx_hash) → TxStatusResult
    - request(method, params) → RequestResult

All return boring frozen dataclasses. No exceptions for "expected"
failures — those are captured in the result objects. Transport-level
failures (connection refused, timeouts) do raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


# =========================================================================
# Result types
# =========================================================================


@dataclass(frozen=True)
class SubmitResult:
    """Result of submitting a signed transaction blob.

    Attributes:
        accepted: Whether the node accepted the transaction for relay.
            True does NOT mean validated.
        tx_hash: Transaction hash (64 hex chars), present when the node
            computed one, even on rejection.
        engine_result: Preliminary engine result (e.g. "tesSUCCESS",
            "temBAD_FEE"). None on server-level errors.
        error_code: "SERVER_ERROR" when the node answered with an error
            instead of an engine result.
        detail: Human-readable detail for diagnostics.
    """

    accepted: bool
    tx_hash: str | None = None
    engine_result: str | None = None
    error_code: str | None = None
    detail: str | None = None


@dataclass(frozen=True)
class TxStatusResult:
    """Result of querying a transaction's ledger status.

    Attributes:
        found: Whether the transaction was found at all.
        validated: Whether it is in a validated ledger.
        ledger_index: Ledger sequence where it was included (validated only).
        engine_result: Final result from ``meta.TransactionResult``.
        meta: Transaction metadata (AffectedNodes etc.), if present.
        fee_drops: The transaction's Fee field, if present.
        error_code: "SERVER_ERROR" if the query itself failed.
        detail: Human-readable detail for diagnostics.
    """

    found: bool
    validated: bool = False
    ledger_index: int | None = None
    engine_result: str | None = None
    meta: dict[str, Any] | None = None
    fee_drops: str | None = None
    error_code: str | None = None
    detail: str | None = None


@dataclass(frozen=True)
class RequestResult:
    """Result of a read-only JSON-RPC request (account_objects, ...).

    Attributes:
        ok: True when the node answered with status "success".
        result: The ``result`` object of the response.
        error: rippled error token when ok is False (e.g. "actNotFound").
        detail: Human-readable error message.
    """

    ok: bool
    result: dict[str, Any] = field(default_factory=dict)
    error: str | None = None
    detail: str | None = None


# =========================================================================
# Protocol
# =========================================================================


@runtime_checkable
class XRPLClient(Protocol):
    """Interface for XRPL network operations.

    Methods are async because network I/O is inherently asynchronous.
    Implementations must not retry submissions: resubmitting needs a
    fresh Sequence, which only the signer can assign.
    """

    async def submit(self, signed_tx_blob_hex: str) -> SubmitResult:
        """Submit a signed transaction blob."""
        ...

    async def get_tx(self, tx_hash: str) -> TxStatusResult:
        """Query the status of a previously submitted transaction."""
        ...

    async def request(self, method: str, params: dict[str, Any]) -> RequestResult:
        """Send a read-only request and return its result object."""
        ...
