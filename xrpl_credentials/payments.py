"""
XRP payments that can carry credential proof.

A payment to a deposit-auth account succeeds only if the sender is
preauthorized by address, or cites (in CredentialIDs) credentials that
match one of the recipient's credential entries. The ledger checks the
cited credentials at apply time; this module only attaches the ids.

A denied payment comes back as SubmissionRejected with code
tecNO_PERMISSION. Whether that is a fault or an expected outcome is the
caller's call.
"""

from __future__ import annotations

import logging
from decimal import Decimal

from xrpl_credentials.codec import xrp_to_drops
from xrpl_credentials.ledger import XRPLGateway
from xrpl_credentials.models import PaymentOutcome
from xrpl_credentials.signer import XRPLSigner
from xrpl_credentials.tx import plan_payment

logger = logging.getLogger(__name__)

NO_PERMISSION = "tecNO_PERMISSION"


class PaymentService:
    def __init__(self, gateway: XRPLGateway) -> None:
        self._gateway = gateway

    async def send(
        self,
        sender: XRPLSigner,
        destination: str,
        amount_drops: str,
        credential_ids: list[str] | None = None,
    ) -> PaymentOutcome:
        """Pay ``amount_drops`` to ``destination``.

        Raises:
            SubmissionRejected: e.g. tecNO_PERMISSION when the recipient's
                deposit auth refuses the sender, or tecBAD_CREDENTIALS
                when a cited credential is missing, unaccepted or expired.
        """
        tx = plan_payment(
            sender.account, destination, amount_drops, credential_ids=credential_ids
        )
        outcome = await self._gateway.submit(sender, tx)
        logger.info(
            "Paid %s drops %s -> %s (%d credential(s))",
            amount_drops, sender.account, destination, len(credential_ids or []),
        )
        return PaymentOutcome(
            tx_hash=outcome.tx_hash,
            engine_result=outcome.engine_result,
            destination=destination,
            amount_drops=amount_drops,
            fee_drops=outcome.fee_drops,
            credential_ids=tuple(credential_ids or ()),
        )

    async def send_xrp(
        self,
        sender: XRPLSigner,
        destination: str,
        xrp_amount: str | Decimal,
        credential_ids: list[str] | None = None,
    ) -> PaymentOutcome:
        return await self.send(
            sender, destination, xrp_to_drops(xrp_amount), credential_ids=credential_ids
        )
