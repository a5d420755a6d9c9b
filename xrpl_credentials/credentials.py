"""
Credential client — issue, accept, revoke and list credentials.

Each mutating method builds a transaction with tx.py, encodes fields
with codec.py, and hands it to the gateway, which signs, submits and
waits under the signer's account lock. Reads go straight to
``account_objects``.

Lifecycle (ledger-enforced, observed only):
    NonExistent → Created(unaccepted) → Created(accepted) → Deleted

Expiration is not a state the ledger records: an expired credential
stays in the ledger until someone deletes it. Use
``Credential.is_expired()`` to reason about usability.

Who may delete (ledger-enforced): the issuer, the subject, or anyone
once the credential has expired.
"""

from __future__ import annotations

import logging

from xrpl_credentials.codec import encode_text, encode_timestamp, same_blob
from xrpl_credentials.errors import CredentialNotFound, ResponseMalformed
from xrpl_credentials.ledger import XRPLGateway
from xrpl_credentials.models import Credential, CredentialRequest
from xrpl_credentials.signer import XRPLSigner
from xrpl_credentials.tx import (
    plan_credential_accept,
    plan_credential_create,
    plan_credential_delete,
)

logger = logging.getLogger(__name__)

CREDENTIAL_ENTRY_TYPE = "Credential"


class CredentialClient:
    """Credential lifecycle operations over an XRPLGateway."""

    def __init__(self, gateway: XRPLGateway) -> None:
        self._gateway = gateway

    async def issue(self, issuer: XRPLSigner, request: CredentialRequest) -> str:
        """Create a credential and return its ledger-entry id.

        Args:
            issuer: Signer for the issuing account.
            request: Subject, type and optional expiration/URI/memo.

        Returns:
            The new Credential entry's LedgerIndex, needed later to cite
            it in a payment's CredentialIDs.

        Raises:
            SubmissionRejected: On any non-success result (e.g.
                tecDUPLICATE if the credential already exists).
            ResponseMalformed: If the metadata has no created Credential.
            InvalidTimestamp: If the expiration is not representable.
        """
        tx = plan_credential_create(
            issuer.account,
            request.subject,
            encode_text(request.credential_type),
            expiration=(
                encode_timestamp(request.expiration) if request.expiration is not None else None
            ),
            uri_hex=encode_text(request.uri) if request.uri is not None else None,
            memos=[request.memo] if request.memo is not None else None,
        )
        outcome = await self._gateway.submit(issuer, tx)

        created = outcome.created_nodes(CREDENTIAL_ENTRY_TYPE)
        if len(created) != 1 or not created[0].get("LedgerIndex"):
            raise ResponseMalformed(
                f"tx {outcome.tx_hash} succeeded but metadata has "
                f"{len(created)} created Credential node(s)"
            )
        credential_id: str = created[0]["LedgerIndex"]
        logger.info(
            "Issued credential %s type=%s subject=%s id=%s",
            outcome.tx_hash, request.credential_type, request.subject, credential_id,
        )
        return credential_id

    async def accept(
        self, subject: XRPLSigner, issuer: str, credential_type: str | bytes
    ) -> str:
        """Accept a credential as its subject. Returns the tx hash."""
        tx = plan_credential_accept(subject.account, issuer, encode_text(credential_type))
        outcome = await self._gateway.submit(subject, tx)
        logger.info(
            "Accepted credential type=%s issuer=%s subject=%s",
            credential_type, issuer, subject.account,
        )
        return outcome.tx_hash

    async def revoke(
        self,
        caller: XRPLSigner,
        credential_type: str | bytes,
        subject: str | None = None,
        issuer: str | None = None,
    ) -> str:
        """Delete a credential. Returns the tx hash.

        Addressing:
            - subject and/or issuer given: delete the credential they
              identify (the ledger fills the missing side with the caller).
            - neither given: find the caller's own issued credential of
              this type; exactly one must exist.

        Raises:
            CredentialNotFound: Auto-discovery found zero or several.
            SubmissionRejected: On any non-success result (e.g.
                tecNO_PERMISSION if the caller may not delete it).
        """
        if not credential_type:
            raise ValueError("credential_type must be non-empty")

        if subject is None and issuer is None:
            subject = await self._discover_subject(caller.account, credential_type)

        tx = plan_credential_delete(
            caller.account,
            encode_text(credential_type),
            subject=subject,
            issuer=issuer,
        )
        outcome = await self._gateway.submit(caller, tx)
        logger.info(
            "Revoked credential type=%s subject=%s issuer=%s by %s",
            credential_type, subject or caller.account, issuer or caller.account, caller.account,
        )
        return outcome.tx_hash

    async def _discover_subject(self, account: str, credential_type: str | bytes) -> str:
        matches = [
            cred
            for cred in await self.list_credentials(account)
            if cred.issuer == account and same_blob(cred.credential_type, credential_type)
        ]
        if len(matches) != 1:
            raise CredentialNotFound(
                f"expected one credential of type {credential_type!r} issued by {account}, "
                f"found {len(matches)}"
            )
        logger.debug("Found credential type=%s subject=%s", credential_type, matches[0].subject)
        return matches[0].subject

    async def list_credentials(self, account: str, subject: str | None = None) -> list[Credential]:
        """Credentials in ``account``'s owner directory, decoded.

        A credential is linked into both the issuer's and the subject's
        directories from creation, accepted or not.

        Args:
            account: Address whose objects to read.
            subject: Keep only credentials about this address.

        Raises:
            LedgerRequestError: On a server-level error other than actNotFound.
            TransportFailure: On connection/timeout errors.
        """
        objects = await self._gateway.account_objects(account, "credential")
        credentials = [
            Credential.from_ledger(obj)
            for obj in objects
            if obj.get("LedgerEntryType", CREDENTIAL_ENTRY_TYPE) == CREDENTIAL_ENTRY_TYPE
        ]
        if subject is not None:
            credentials = [cred for cred in credentials if cred.subject == subject]
        return credentials

    async def get(
        self,
        account: str,
        *,
        issuer: str,
        subject: str,
        credential_type: str | bytes,
    ) -> Credential | None:
        """The one credential identified by (issuer, subject, type), if present."""
        for cred in await self.list_credentials(account, subject=subject):
            if cred.issuer == issuer and same_blob(cred.credential_type, credential_type):
                return cred
        return None
