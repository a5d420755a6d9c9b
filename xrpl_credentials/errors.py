"""
Error types and XRPL result-code classification.

Two concerns live here:

    1. The exception hierarchy raised by the credential, deposit-auth and
       payment services. Everything derives from ``CredentialError`` so
       callers can catch the whole family in one place.

    2. A coarse, conservative mapping from XRPL engine result codes to a
       small set of categories. Unknown codes default to UNKNOWN rather
       than guessing.

XRPL engine result prefixes:
    - tes: success (tesSUCCESS)
    - tec: claimed cost (tecNO_PERMISSION, tecDUPLICATE, ...) — tx included
      in a ledger but "failed"
    - tef: local failure (tefPAST_SEQ, ...) — not forwarded
    - tel: local error (telINSUF_FEE_P, ...) — not forwarded
    - tem: malformed (temBAD_FEE, ...) — not forwarded
    - ter: retry (terQUEUED, terPRE_SEQ, ...) — may succeed later

The client and transport layers never raise for "expected" ledger
errors; those come back inside result objects. The gateway converts them
to the exceptions below exactly once.

Reference:
    https://xrpl.org/docs/references/protocol/transactions/transaction-results
"""

from __future__ import annotations

from enum import Enum

SUCCESS = "tesSUCCESS"


# =========================================================================
# Exceptions
# =========================================================================


class CredentialError(Exception):
    """Base class for every error raised by this package."""


class MalformedEncoding(CredentialError, ValueError):
    """Invalid hex, or bytes that do not decode as UTF-8 text."""


class InvalidTimestamp(CredentialError, ValueError):
    """Timestamp outside the range representable in the Ripple epoch."""


class SubmissionRejected(CredentialError):
    """The ledger returned a non-success result code for a transaction.

    The code is preserved verbatim. Some codes (``tecNO_PERMISSION`` for a
    payment to a deposit-auth account, for instance) are legitimate
    negative outcomes rather than faults; the caller decides.

    Attributes:
        code: XRPL engine result (e.g. "tecNO_PERMISSION"). None when the
            server answered with a server-level error instead.
        tx_hash: Transaction hash, if the node computed one.
        detail: Human-readable message from the node.
    """

    def __init__(
        self,
        code: str | None,
        *,
        tx_hash: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.code = code
        self.tx_hash = tx_hash
        self.detail = detail
        message = f"transaction rejected: {code or 'no engine result'}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)

    @property
    def category(self) -> ResultCategory:
        return classify_engine_result(self.code)


class SubmissionPending(CredentialError):
    """Submitted, but not seen in a validated ledger after max_polls polls.

    This is neither success nor failure. The transaction may still be
    validated later; query ``tx_hash`` before deciding to resubmit.
    """

    def __init__(self, tx_hash: str | None, *, engine_result: str | None = None) -> None:
        self.tx_hash = tx_hash
        self.engine_result = engine_result
        super().__init__(f"transaction {tx_hash} not validated yet")


class ResponseMalformed(CredentialError):
    """A response lacked the shape the client needed to extract a value."""


class CredentialNotFound(CredentialError):
    """Auto-discovery found no credential, or more than one."""


class TransportFailure(CredentialError):
    """Connection, TLS, HTTP or timeout failure underneath the client.

    The underlying exception is chained as ``__cause__``.
    """


class LedgerRequestError(CredentialError):
    """Server-level error answering a read request (e.g. actNotFound).

    Attributes:
        error: rippled error token (e.g. "actNotFound").
        detail: Human-readable message from the node.
    """

    def __init__(self, error: str, detail: str | None = None) -> None:
        self.error = error
        self.detail = detail
        super().__init__(f"{error}: {detail}" if detail else error)


# =========================================================================
# Engine result → ResultCategory
# =========================================================================


class ResultCategory(str, Enum):
    SUCCESS = "SUCCESS"
    CLAIMED_COST = "CLAIMED_COST"
    MALFORMED = "MALFORMED"
    FAILURE = "FAILURE"
    LOCAL_ERROR = "LOCAL_ERROR"
    RETRY = "RETRY"
    UNKNOWN = "UNKNOWN"

    def is_retriable(self) -> bool:
        """Only ter* codes may succeed unchanged on a later attempt."""
        return self is ResultCategory.RETRY

    def __str__(self) -> str:
        return self.value


# Coarse prefix-based mapping.
_PREFIX_MAP: dict[str, ResultCategory] = {
    "tec": ResultCategory.CLAIMED_COST,  # included, fee burned
    "tem": ResultCategory.MALFORMED,     # won't ever succeed
    "tef": ResultCategory.FAILURE,       # won't be forwarded
    "tel": ResultCategory.LOCAL_ERROR,   # this server refused it
    "ter": ResultCategory.RETRY,         # may succeed later; no auto-retry
}


def classify_engine_result(engine_result: str | None) -> ResultCategory:
    """Map an XRPL engine result code to a ResultCategory.

    Args:
        engine_result: XRPL engine result string (e.g. "tesSUCCESS",
            "temBAD_FEE"). None means the engine never responded.

    Returns:
        ResultCategory. UNKNOWN for unrecognized codes or None.
    """
    if engine_result is None:
        return ResultCategory.UNKNOWN
    if engine_result == SUCCESS:
        return ResultCategory.SUCCESS

    for prefix, category in _PREFIX_MAP.items():
        if engine_result.startswith(prefix):
            return category

    return ResultCategory.UNKNOWN


def is_forwarded(engine_result: str | None) -> bool:
    """Whether a preliminary submit result can still end up in a ledger.

    tes, tec and ter results are relayed and may be validated; tem, tef
    and tel results are final at submit time.
    """
    return classify_engine_result(engine_result) in (
        ResultCategory.SUCCESS,
        ResultCategory.CLAIMED_COST,
        ResultCategory.RETRY,
    )
