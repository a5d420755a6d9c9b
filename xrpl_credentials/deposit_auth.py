"""
Deposit authorization — who may pay an account.

With lsfDepositAuth set, an account only receives payments from senders
it has preauthorized. Two allow-lists, stored as DepositPreauth ledger
objects owned by the receiving account:

    - Address entries (``Authorize``): one sender account each.
    - Credential entries (``AuthorizeCredentials``): any sender who cites,
      in the payment's CredentialIDs, accepted and unexpired credentials
      matching the entry's full set of (issuer, credential_type) pairs.

The flag and the allow-lists are independent settings. Enabling the
flag with empty allow-lists rejects every inbound payment without
proof, and the allow-lists have no effect while the flag is clear.

Credential lists are not merged: each DepositPreauth submission names
the complete set for one entry, and removal must name that same set.
To grow a set, read it with ``list_credential_type_entries``, remove the
old entry with ``unauthorize_credential_types`` and submit the larger
one.
"""

from __future__ import annotations

import logging

from xrpl_credentials.codec import encode_text
from xrpl_credentials.ledger import XRPLGateway
from xrpl_credentials.models import LSF_DEPOSIT_AUTH, CredentialAuthorization
from xrpl_credentials.signer import XRPLSigner
from xrpl_credentials.tx import ASF_DEPOSIT_AUTH, plan_account_set_flag, plan_deposit_preauth

logger = logging.getLogger(__name__)


class DepositAuthConfigurator:
    """Manage an account's deposit-auth flag and preauthorization lists."""

    def __init__(self, gateway: XRPLGateway) -> None:
        self._gateway = gateway

    # -----------------------------------------------------------------
    # Flag
    # -----------------------------------------------------------------

    async def is_deposit_auth_enabled(self, address: str) -> bool:
        flags = await self._gateway.account_flags(address)
        return bool(flags & LSF_DEPOSIT_AUTH)

    async def ensure_deposit_auth_enabled(self, account: XRPLSigner) -> bool:
        """Set lsfDepositAuth unless it is already set.

        Returns:
            True if this call changed the setting, False if it was
            already enabled.
        """
        if await self.is_deposit_auth_enabled(account.account):
            logger.debug("Deposit auth already enabled on %s", account.account)
            return False
        await self._gateway.submit(account, plan_account_set_flag(account.account, ASF_DEPOSIT_AUTH))
        logger.info("Enabled deposit auth on %s", account.account)
        return True

    async def disable_deposit_auth(self, account: XRPLSigner) -> bool:
        """Clear lsfDepositAuth. Returns True if this call changed it."""
        if not await self.is_deposit_auth_enabled(account.account):
            return False
        await self._gateway.submit(
            account, plan_account_set_flag(account.account, ASF_DEPOSIT_AUTH, clear=True)
        )
        logger.info("Disabled deposit auth on %s", account.account)
        return True

    # -----------------------------------------------------------------
    # Credential allow-list
    # -----------------------------------------------------------------

    async def authorize_credential_type(
        self, account: XRPLSigner, issuer: str, credential_type: str | bytes
    ) -> str:
        """Preauthorize holders of one (issuer, credential_type). Returns tx hash."""
        return await self.authorize_credential_types(account, [(issuer, credential_type)])

    async def authorize_credential_types(
        self, account: XRPLSigner, pairs: list[tuple[str, str | bytes]]
    ) -> str:
        """Preauthorize holders of ALL the given (issuer, credential_type) pairs.

        The pairs form one entry: a sender must present a matching
        credential for each of them. Returns tx hash.

        Raises:
            ValueError: Empty, duplicate or more than 8 pairs.
            SubmissionRejected: e.g. tecDUPLICATE if the entry exists.
        """
        tx = plan_deposit_preauth(
            account.account,
            authorize_credentials=_encode_pairs(pairs),
        )
        outcome = await self._gateway.submit(account, tx)
        logger.info("Authorized credentials %s on %s", pairs, account.account)
        return outcome.tx_hash

    async def unauthorize_credential_type(
        self, account: XRPLSigner, issuer: str, credential_type: str | bytes
    ) -> str:
        """Remove a single-pair entry. Returns tx hash."""
        return await self.unauthorize_credential_types(account, [(issuer, credential_type)])

    async def unauthorize_credential_types(
        self, account: XRPLSigner, pairs: list[tuple[str, str | bytes]]
    ) -> str:
        """Remove the entry whose set is exactly ``pairs`` (in any order).

        Raises:
            ValueError: Empty, duplicate or more than 8 pairs.
            SubmissionRejected: tecNO_ENTRY unless an entry has that exact set.
        """
        tx = plan_deposit_preauth(
            account.account,
            unauthorize_credentials=_encode_pairs(pairs),
        )
        outcome = await self._gateway.submit(account, tx)
        logger.info("Removed credential authorization %s on %s", pairs, account.account)
        return outcome.tx_hash

    async def list_credential_type_entries(
        self, address: str
    ) -> list[tuple[CredentialAuthorization, ...]]:
        """``address``'s credential entries, one tuple of pairs per entry.

        Pass an entry's pairs back to ``unauthorize_credential_types`` to
        remove it.
        """
        return [
            tuple(CredentialAuthorization.from_ledger(item) for item in obj["AuthorizeCredentials"])
            for obj in await self._gateway.account_objects(address, "deposit_preauth")
            if obj.get("AuthorizeCredentials")
        ]

    async def list_credential_type_authorizations(
        self, address: str
    ) -> list[CredentialAuthorization]:
        """Every (issuer, credential_type) in ``address``'s credential entries, flattened."""
        return [
            pair
            for entry in await self.list_credential_type_entries(address)
            for pair in entry
        ]

    # -----------------------------------------------------------------
    # Address allow-list
    # -----------------------------------------------------------------

    async def authorize_address(self, account: XRPLSigner, address: str) -> str:
        tx = plan_deposit_preauth(account.account, authorize=address)
        outcome = await self._gateway.submit(account, tx)
        logger.info("Preauthorized %s on %s", address, account.account)
        return outcome.tx_hash

    async def unauthorize_address(self, account: XRPLSigner, address: str) -> str:
        tx = plan_deposit_preauth(account.account, unauthorize=address)
        outcome = await self._gateway.submit(account, tx)
        logger.info("Removed preauthorization of %s on %s", address, account.account)
        return outcome.tx_hash

    async def list_address_authorizations(self, address: str) -> list[str]:
        return [
            obj["Authorize"]
            for obj in await self._gateway.account_objects(address, "deposit_preauth")
            if obj.get("Authorize")
        ]


def _encode_pairs(pairs: list[tuple[str, str | bytes]]) -> list[tuple[str, str]]:
    return [(issuer, encode_text(ctype)) for issuer, ctype in pairs]
