"""
XRPL Credentials client library.

Public API:

    Services (network I/O, async):
        - ``CredentialClient`` — issue, accept, revoke, list, get.
        - ``DepositAuthConfigurator`` — deposit-auth flag and
          preauthorization allow-lists.
        - ``PaymentService`` — XRP payments citing credential ids.
        - ``XRPLGateway`` — sign/submit/wait under a per-account lock.

    Pure layer (no I/O):
        - Codec: ``encode_text``, ``decode_hex``, ``decode_blob``, ``encode_timestamp``,
          ``decode_timestamp``, ``xrp_to_drops``, ``drops_to_xrp``.
        - Memos: ``Memo``, ``json_memo``.
        - Transaction builders in ``xrpl_credentials.tx``.

    Protocols (for dependency injection):
        - ``XRPLClient`` — network boundary.
        - ``XRPLSigner`` — secrets boundary.
        - ``JsonRpcTransport`` — HTTP boundary.

    Concrete client:
        - ``JsonRpcClient`` over ``HttpxTransport``.

    Errors:
        - ``CredentialError`` and subclasses; ``classify_engine_result()``.

    Configuration:
        - ``load_settings()``, ``build_gateway()``, ``KeyValueStore``.
"""

import logging

from xrpl_credentials.client import RequestResult, SubmitResult, TxStatusResult, XRPLClient
from xrpl_credentials.codec import (
    decode_blob,
    decode_hex,
    decode_timestamp,
    drops_to_xrp,
    encode_text,
    encode_timestamp,
    xrp_to_drops,
)
from xrpl_credentials.config import Settings, build_gateway, load_settings, open_store
from xrpl_credentials.credentials import CredentialClient
from xrpl_credentials.deposit_auth import DepositAuthConfigurator
from xrpl_credentials.errors import (
    CredentialError,
    CredentialNotFound,
    InvalidTimestamp,
    LedgerRequestError,
    MalformedEncoding,
    ResponseMalformed,
    ResultCategory,
    SubmissionPending,
    SubmissionRejected,
    TransportFailure,
    classify_engine_result,
)
from xrpl_credentials.jsonrpc_client import JsonRpcClient
from xrpl_credentials.ledger import AccountLocks, XRPLGateway
from xrpl_credentials.memo import Memo, json_memo
from xrpl_credentials.models import (
    Credential,
    CredentialAuthorization,
    CredentialRequest,
    LedgerOutcome,
    PaymentOutcome,
)
from xrpl_credentials.payments import PaymentService
from xrpl_credentials.signer import SignResult, XRPLSigner
from xrpl_credentials.store import CREDENTIAL_ID_KEY, KeyValueStore
from xrpl_credentials.transport import HttpxTransport, JsonRpcTransport

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "AccountLocks",
    "CREDENTIAL_ID_KEY",
    "Credential",
    "CredentialAuthorization",
    "CredentialClient",
    "CredentialError",
    "CredentialNotFound",
    "CredentialRequest",
    "DepositAuthConfigurator",
    "HttpxTransport",
    "InvalidTimestamp",
    "JsonRpcClient",
    "JsonRpcTransport",
    "KeyValueStore",
    "LedgerOutcome",
    "LedgerRequestError",
    "MalformedEncoding",
    "Memo",
    "PaymentOutcome",
    "PaymentService",
    "RequestResult",
    "ResponseMalformed",
    "ResultCategory",
    "Settings",
    "SignResult",
    "SubmissionPending",
    "SubmissionRejected",
    "SubmitResult",
    "TransportFailure",
    "TxStatusResult",
    "XRPLClient",
    "XRPLGateway",
    "XRPLSigner",
    "build_gateway",
    "classify_engine_result",
    "decode_blob",
    "decode_hex",
    "decode_timestamp",
    "drops_to_xrp",
    "encode_text",
    "encode_timestamp",
    "json_memo",
    "load_settings",
    "open_store",
    "xrp_to_drops",
]
