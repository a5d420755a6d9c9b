"""
XRPL JSON-RPC client — real network implementation of XRPLClient.

Translates rippled JSON-RPC responses into SubmitResult, TxStatusResult
and RequestResult. Uses an injectable transport (JsonRpcTransport) so
the HTTP layer can be swapped for test fakes without changing parsing
logic.

No retry loops. No secrets. No XRPL logic beyond response parsing.

Response parsing targets rippled JSON-RPC conventions:
    - Successful responses: {"result": {"status": "success", ...}}
    - Error responses: {"result": {"status": "error", "error": "...", ...}}
    - submit responses include: engine_result, accepted, applied, tx_json
    - tx responses include: validated, ledger_index, meta, hash, Fee
"""

from __future__ import annotations

import itertools
from typing import Any

from xrpl_credentials.client import RequestResult, SubmitResult, TxStatusResult
from xrpl_credentials.errors import is_forwarded
from xrpl_credentials.transport import HttpxTransport, JsonRpcTransport


class JsonRpcClient:
    """XRPL JSON-RPC client implementing the XRPLClient protocol.

    Args:
        url: The rippled JSON-RPC endpoint URL (e.g.
            "https://s.devnet.rippletest.net:51234/").
        transport: Injectable transport for HTTP POST. Defaults to
            HttpxTransport.
    """

    def __init__(
        self,
        url: str,
        transport: JsonRpcTransport | None = None,
    ) -> None:
        self._url = url
        self._transport = transport or HttpxTransport()
        self._ids = itertools.count(1)

    @property
    def url(self) -> str:
        """The JSON-RPC endpoint URL."""
        return self._url

    async def _call(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        payload = {
            "method": method,
            "params": [params],
            "id": next(self._ids),
        }
        response = await self._transport.post_json(self._url, payload)
        result = response.get("result") if isinstance(response, dict) else None
        return result if isinstance(result, dict) else {}

    # -----------------------------------------------------------------
    # XRPLClient protocol methods
    # -----------------------------------------------------------------

    async def submit(self, signed_tx_blob_hex: str) -> SubmitResult:
        """Submit a signed blob with the ``submit`` method.

        Transport exceptions propagate to the caller.
        """
        result = await self._call("submit", {"tx_blob": signed_tx_blob_hex})
        return _parse_submit_result(result)

    async def get_tx(self, tx_hash: str) -> TxStatusResult:
        """Query transaction status with the ``tx`` method.

        Transport exceptions propagate to the caller.
        """
        result = await self._call("tx", {"transaction": tx_hash, "binary": False})
        return _parse_tx_result(result)

    async def request(self, method: str, params: dict[str, Any]) -> RequestResult:
        """Send a read-only request (account_objects, account_info, ...).

        Transport exceptions propagate to the caller.
        """
        result = await self._call(method, params)
        return _parse_request_result(result)


# =====================================================================
# Response parsing (pure functions, no I/O)
# =====================================================================


def _error_detail(result: dict[str, Any], fallback: str) -> str:
    return result.get("error_message") or result.get("error") or fallback


def _parse_submit_result(result: dict[str, Any]) -> SubmitResult:
    """Parse the ``result`` of a rippled submit response.

    Handles:
        - Successful submit (engine_result present)
        - Server-level errors (status == "error")
        - Missing fields (accepted=False with detail)
    """
    if result.get("status") == "error":
        return SubmitResult(
            accepted=False,
            error_code="SERVER_ERROR",
            detail=_error_detail(result, "unknown server error"),
        )

    engine_result = result.get("engine_result")
    if engine_result is None:
        return SubmitResult(
            accepted=False,
            error_code="SERVER_ERROR",
            detail="no engine_result in submit response",
        )

    tx_hash = None
    tx_json = result.get("tx_json")
    if isinstance(tx_json, dict):
        tx_hash = tx_json.get("hash")

    # Some server versions omit "accepted"; infer from the result prefix.
    accepted = result.get("accepted")
    if accepted is None:
        accepted = is_forwarded(engine_result)

    return SubmitResult(
        accepted=bool(accepted),
        tx_hash=tx_hash,
        engine_result=engine_result,
        detail=result.get("engine_result_message"),
    )


def _parse_tx_result(result: dict[str, Any]) -> TxStatusResult:
    """Parse the ``result`` of a rippled tx response.

    Handles:
        - Transaction found and validated
        - Transaction found but not yet validated
        - Transaction not found (txnNotFound error)
        - Server-level errors
    """
    if result.get("status") == "error":
        error = result.get("error", "")
        if error == "txnNotFound":
            return TxStatusResult(found=False)
        return TxStatusResult(
            found=False,
            error_code="SERVER_ERROR",
            detail=_error_detail(result, "unknown server error"),
        )

    validated = bool(result.get("validated", False))
    ledger_index = result.get("ledger_index")

    meta = result.get("meta")
    if not isinstance(meta, dict):
        meta = None
    engine_result = meta.get("TransactionResult") if meta is not None else None

    # API v2 nests the transaction under tx_json.
    tx_json = result.get("tx_json")
    fee = tx_json.get("Fee") if isinstance(tx_json, dict) else result.get("Fee")

    return TxStatusResult(
        found=True,
        validated=validated,
        ledger_index=ledger_index if validated else None,
        engine_result=engine_result,
        meta=meta,
        fee_drops=fee,
    )


def _parse_request_result(result: dict[str, Any]) -> RequestResult:
    """Parse the ``result`` of any read-only request."""
    if result.get("status") == "error" or "error" in result:
        return RequestResult(
            ok=False,
            result=result,
            error=result.get("error", "unknown"),
            detail=result.get("error_message"),
        )
    return RequestResult(ok=True, result=result)
