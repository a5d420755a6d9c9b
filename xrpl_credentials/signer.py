"""
XRPL signer protocol — the secrets boundary.

The services never see private keys. They pass an unsigned transaction
dict (from tx.py), and the signer returns a signed blob. The signer is
also responsible for autofilling network fields (Sequence, Fee,
LastLedgerSequence, SigningPubKey), since those depend on the account's
state and the key in use.

The signer exposes its account address, which the services use as the
``Account`` of every transaction they build and as the key for
per-account submission locking, plus a key_id that is safe to log.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class SignResult:
    """Result of signing a transaction.

    Attributes:
        signed_tx_blob_hex: Hex-encoded signed blob, ready for
            XRPLClient.submit().
        tx_hash: Transaction hash computed during signing.
        key_id: Public identifier of the signing key. Never a secret.
        fee_drops: The Fee the signer autofilled, if it reports one.
    """

    signed_tx_blob_hex: str
    tx_hash: str
    key_id: str
    fee_drops: str | None = None


@runtime_checkable
class XRPLSigner(Protocol):
    """Interface for XRPL transaction signing.

    Properties:
        account: The XRPL r-address associated with this signer.
        key_id: Public identifier of the signing key (safe for logging).
    """

    @property
    def account(self) -> str:
        ...

    @property
    def key_id(self) -> str:
        ...

    def sign(self, tx_dict: dict[str, object]) -> SignResult:
        """Autofill and sign an unsigned transaction dict.

        Raises:
            ValueError: If the transaction dict is malformed.
        """
        ...
