"""
Ledger gateway — the one place that talks to the client and signer.

Composes the network boundary (client.py) with the secrets boundary
(signer.py) and turns result objects into typed values or exceptions:

    - ``submit()`` — sign, submit, wait for validation. Returns a
      LedgerOutcome for tesSUCCESS, raises otherwise.
    - ``account_objects()`` — paginated read of one object type.
    - ``account_flags()`` — the AccountRoot Flags bitmask.

Submission flow:
    1. Acquire the signing account's lock.
    2. Sign (the signer autofills Sequence/Fee/LastLedgerSequence).
    3. Submit. Not accepted → SubmissionRejected(preliminary result).
    4. Poll ``tx`` every ``poll_interval`` seconds, up to ``max_polls``
       times, until it shows up in a validated ledger.
    5. Release the lock. Validated tesSUCCESS → LedgerOutcome;
       validated anything else → SubmissionRejected(final result);
       never validated → SubmissionPending.

Mutual exclusion:
    Transactions from one account race on Sequence. At most one
    sign-submit-wait cycle runs per signing account at a time; different
    accounts proceed concurrently. Reads take no lock.

No retries. No caching: every read is a fresh request.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from xrpl_credentials.client import RequestResult, TxStatusResult, XRPLClient
from xrpl_credentials.errors import (
    SUCCESS,
    CredentialError,
    LedgerRequestError,
    ResponseMalformed,
    SubmissionPending,
    SubmissionRejected,
    TransportFailure,
)
from xrpl_credentials.models import LedgerOutcome
from xrpl_credentials.schema import ACCOUNT_INFO_SCHEMA, validate
from xrpl_credentials.signer import XRPLSigner

logger = logging.getLogger(__name__)

# account_objects page size (rippled allows 10-400).
PAGE_LIMIT = 200

ACCOUNT_NOT_FOUND = "actNotFound"


class AccountLocks:
    """One asyncio.Lock per signing address, created on first use.

    An entry is dropped once no task holds or waits on it, so the map
    does not grow with every account the gateway has ever signed for.
    """

    def __init__(self) -> None:
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._locks)

    def lock_for(self, account: str) -> asyncio.Lock:
        lock = self._locks.get(account)
        if lock is None:
            lock = self._locks[account] = asyncio.Lock()
        return lock

    def is_locked(self, account: str) -> bool:
        lock = self._locks.get(account)
        return lock is not None and lock.locked()

    @asynccontextmanager
    async def hold(self, account: str) -> AsyncIterator[None]:
        lock = self.lock_for(account)
        self._users[account] = self._users.get(account, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._users[account] -= 1
            if not self._users[account]:
                del self._users[account]
                del self._locks[account]


class XRPLGateway:
    """Sign/submit/wait and typed reads on top of an XRPLClient.

    Args:
        client: Network client (JsonRpcClient or a fake).
        poll_interval: Seconds between ``tx`` polls while waiting for
            validation.
        max_polls: Polls before giving up with SubmissionPending.
        locks: Shared AccountLocks, for gateways that must coordinate
            with each other. A fresh one by default.
    """

    def __init__(
        self,
        client: XRPLClient,
        *,
        poll_interval: float = 1.0,
        max_polls: int = 20,
        locks: AccountLocks | None = None,
    ) -> None:
        if max_polls < 1:
            raise ValueError(f"max_polls must be >= 1, got {max_polls}")
        self._client = client
        self._poll_interval = poll_interval
        self._max_polls = max_polls
        self._locks = locks if locks is not None else AccountLocks()

    @property
    def client(self) -> XRPLClient:
        return self._client

    @property
    def locks(self) -> AccountLocks:
        return self._locks

    # -----------------------------------------------------------------
    # Submission
    # -----------------------------------------------------------------

    async def submit(self, signer: XRPLSigner, tx: dict[str, object]) -> LedgerOutcome:
        """Sign, submit and wait for one transaction.

        Raises:
            ValueError: If tx's Account is not the signer's account.
            SubmissionRejected: On any non-success result.
            SubmissionPending: If not validated after max_polls polls.
            TransportFailure: On connection/timeout errors.
        """
        if tx.get("Account") != signer.account:
            raise ValueError(
                f"tx Account {tx.get('Account')!r} does not match signer {signer.account!r}"
            )
        tx_type = tx.get("TransactionType")

        async with self._locks.hold(signer.account):
            sign_result = signer.sign(tx)
            logger.debug(
                "Submitting %s from %s key_id=%s", tx_type, signer.account, sign_result.key_id
            )
            submitted = await self._guard(self._client.submit(sign_result.signed_tx_blob_hex))
            tx_hash = submitted.tx_hash or sign_result.tx_hash

            if not submitted.accepted:
                logger.warning(
                    "%s from %s rejected at submit: %s",
                    tx_type, signer.account, submitted.engine_result or submitted.detail,
                )
                raise SubmissionRejected(
                    submitted.engine_result, tx_hash=tx_hash, detail=submitted.detail
                )

            status = await self._wait_validated(tx_hash, submitted.engine_result)

        if status.engine_result is None:
            raise ResponseMalformed(f"validated tx {tx_hash} has no TransactionResult")
        if status.engine_result != SUCCESS:
            logger.warning(
                "%s %s failed in ledger %s: %s",
                tx_type, tx_hash, status.ledger_index, status.engine_result,
            )
            raise SubmissionRejected(status.engine_result, tx_hash=tx_hash)

        logger.debug("%s %s validated in ledger %s", tx_type, tx_hash, status.ledger_index)
        return LedgerOutcome(
            tx_hash=tx_hash,
            engine_result=status.engine_result,
            validated=True,
            ledger_index=status.ledger_index,
            meta=status.meta,
            fee_drops=status.fee_drops or sign_result.fee_drops,
        )

    async def _wait_validated(self, tx_hash: str, preliminary: str | None) -> TxStatusResult:
        for attempt in range(1, self._max_polls + 1):
            status = await self._guard(self._client.get_tx(tx_hash))
            if status.found and status.validated:
                return status
            if status.error_code is not None:
                logger.debug("tx %s poll %d: %s", tx_hash, attempt, status.detail)
            if attempt < self._max_polls:
                await asyncio.sleep(self._poll_interval)

        logger.warning(
            "tx %s not validated after %d polls (preliminary %s)",
            tx_hash, self._max_polls, preliminary,
        )
        raise SubmissionPending(tx_hash, engine_result=preliminary)

    # -----------------------------------------------------------------
    # Reads
    # -----------------------------------------------------------------

    async def request(self, method: str, params: dict[str, Any]) -> dict[str, Any]:
        """Send a read-only request and return its result object.

        Raises:
            LedgerRequestError: On a server-level error (e.g. actNotFound).
            TransportFailure: On connection/timeout errors.
        """
        result: RequestResult = await self._guard(self._client.request(method, params))
        if not result.ok:
            raise LedgerRequestError(result.error or "unknown", result.detail)
        return result.result

    async def account_objects(self, address: str, object_type: str) -> list[dict[str, Any]]:
        """All objects of one type owned by ``address``, following markers.

        An account that does not exist owns nothing: actNotFound yields [].
        """
        params: dict[str, Any] = {
            "account": address,
            "type": object_type,
            "ledger_index": "validated",
            "limit": PAGE_LIMIT,
        }
        objects: list[dict[str, Any]] = []
        while True:
            try:
                result = await self.request("account_objects", params)
            except LedgerRequestError as exc:
                if exc.error == ACCOUNT_NOT_FOUND:
                    return []
                raise
            page = result.get("account_objects")
            if not isinstance(page, list):
                raise ResponseMalformed("account_objects response has no account_objects list")
            objects.extend(obj for obj in page if isinstance(obj, dict))
            marker = result.get("marker")
            if marker is None:
                return objects
            params = {**params, "marker": marker}

    async def account_flags(self, address: str) -> int:
        """The validated AccountRoot Flags of ``address``."""
        result = await self.request(
            "account_info", {"account": address, "ledger_index": "validated"}
        )
        validate(result, ACCOUNT_INFO_SCHEMA, "account_info")
        flags: int = result["account_data"]["Flags"]
        return flags

    # -----------------------------------------------------------------
    # Helpers
    # -----------------------------------------------------------------

    @staticmethod
    async def _guard(call: Any) -> Any:
        """Await a client call, wrapping transport exceptions."""
        try:
            return await call
        except CredentialError:
            raise
        except Exception as exc:
            raise TransportFailure(f"{type(exc).__name__}: {exc}") from exc
