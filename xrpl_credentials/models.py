"""
Domain types for credentials, allow-list entries and ledger outcomes.

All are frozen dataclasses: the client never mutates ledger state
locally, every transition is a round trip through the ledger.

Decoding from ledger objects happens here, once, via the ``from_ledger``
constructors, after a JSON Schema check (schema.py). A missing or
mistyped field raises ResponseMalformed rather than surfacing as a
KeyError deep inside a caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from xrpl_credentials.codec import decode_blob, decode_timestamp, encode_timestamp
from xrpl_credentials.memo import Memo, decode_first_memo
from xrpl_credentials.schema import CREDENTIAL_ENTRY_SCHEMA, CREDENTIAL_PAIR_SCHEMA, validate

# Credential ledger entry flag: the subject has accepted it.
LSF_ACCEPTED = 0x00010000

# AccountRoot flag: deposit authorization is enabled.
LSF_DEPOSIT_AUTH = 0x01000000


@dataclass(frozen=True)
class CredentialRequest:
    """What an issuer asks the ledger to create.

    Attributes:
        subject: r-address the credential is about.
        credential_type: Application-defined type (e.g. "ExamCertification"),
            text or raw bytes.
        expiration: Optional ISO-8601 expiration.
        uri: Optional reference (e.g. a URL to the full certificate).
        memo: Optional informational memo.
    """

    subject: str
    credential_type: str | bytes
    expiration: str | None = None
    uri: str | bytes | None = None
    memo: Memo | None = None


@dataclass(frozen=True)
class Credential:
    """A credential ledger entry, decoded.

    Attributes:
        issuer: r-address that created it.
        subject: r-address it is about.
        credential_type: Decoded credential type: text when the stored
            bytes are UTF-8, otherwise the raw bytes.
        accepted: Whether the subject has accepted it.
        expiration: ISO-8601 UTC expiration, if any.
        uri: Decoded URI, if any (text or raw bytes, as for the type).
        memo: Decoded first memo, if the entry carries one.
        ledger_entry_id: The entry's ledger index, for CredentialIDs.
    """

    issuer: str
    subject: str
    credential_type: str | bytes
    accepted: bool = False
    expiration: str | None = None
    uri: str | bytes | None = None
    memo: Memo | None = None
    ledger_entry_id: str | None = None

    @classmethod
    def from_ledger(cls, obj: dict[str, Any]) -> Credential:
        """Decode an ``account_objects`` Credential entry.

        Raises:
            ResponseMalformed: If the entry does not match its schema.
            MalformedEncoding: If a blob field is not hex.
        """
        validate(obj, CREDENTIAL_ENTRY_SCHEMA, "Credential")
        expiration = obj.get("Expiration")
        uri = obj.get("URI")
        return cls(
            issuer=obj["Issuer"],
            subject=obj["Subject"],
            credential_type=decode_blob(obj["CredentialType"]),
            accepted=bool(obj.get("Flags", 0) & LSF_ACCEPTED),
            expiration=decode_timestamp(expiration) if expiration is not None else None,
            uri=decode_blob(uri) if uri else None,
            memo=decode_first_memo(obj.get("Memos")),
            ledger_entry_id=obj.get("index") or obj.get("LedgerIndex"),
        )

    def is_expired(self, now: datetime | None = None) -> bool:
        """Whether the ledger's clock would treat this credential as expired.

        The ledger does not delete expired entries; it only refuses to
        honour them once the close time has passed the expiration.
        """
        if self.expiration is None:
            return False
        moment = now or datetime.now(timezone.utc)
        return encode_timestamp(moment) > encode_timestamp(self.expiration)

    def is_usable(self, now: datetime | None = None) -> bool:
        """Accepted and unexpired — what a payment proof needs."""
        return self.accepted and not self.is_expired(now)


@dataclass(frozen=True)
class CredentialAuthorization:
    """One (issuer, credential_type) entry of a credential allow-list."""

    issuer: str
    credential_type: str | bytes

    @classmethod
    def from_ledger(cls, entry: dict[str, Any]) -> CredentialAuthorization:
        inner = entry.get("Credential", entry)
        validate(inner, CREDENTIAL_PAIR_SCHEMA, "AuthorizeCredentials")
        return cls(
            issuer=inner["Issuer"],
            credential_type=decode_blob(inner["CredentialType"]),
        )


@dataclass(frozen=True)
class LedgerOutcome:
    """The validated result of one submitted transaction."""

    tx_hash: str
    engine_result: str
    validated: bool
    ledger_index: int | None = None
    meta: dict[str, Any] | None = None
    fee_drops: str | None = None

    def created_nodes(self, entry_type: str) -> list[dict[str, Any]]:
        """CreatedNode records of one LedgerEntryType from the metadata."""
        nodes = (self.meta or {}).get("AffectedNodes")
        if not isinstance(nodes, list):
            return []
        created = []
        for node in nodes:
            record = node.get("CreatedNode") if isinstance(node, dict) else None
            if isinstance(record, dict) and record.get("LedgerEntryType") == entry_type:
                created.append(record)
        return created


@dataclass(frozen=True)
class PaymentOutcome:
    """Result of a validated, successful payment."""

    tx_hash: str
    engine_result: str
    destination: str
    amount_drops: str
    fee_drops: str | None = None
    credential_ids: tuple[str, ...] = ()
