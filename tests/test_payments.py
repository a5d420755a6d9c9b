"""
Tests for PaymentService and end-to-end credential flows.

Test plan:
- Plain payment to an open account succeeds and reports fee/amount
- send_xrp converts to drops
- Deposit auth with a credential allow-list: accepted unexpired
  credential → success, no credential → tecNO_PERMISSION, unaccepted
  credential → tecBAD_CREDENTIALS, expired credential →
  tecBAD_CREDENTIALS, credential of another type → tecNO_PERMISSION
- Address preauthorization bypasses credentials
- The exam-certification scenario: issue with a 1-year expiration, list,
  accept, pay, revoke, list again
"""

from datetime import datetime, timedelta, timezone

import pytest

from fakes import ISSUER, STRANGER, SUBJECT, VERIFIER, FakeLedgerClient, FakeSigner
from xrpl_credentials.codec import encode_timestamp
from xrpl_credentials.credentials import CredentialClient
from xrpl_credentials.deposit_auth import DepositAuthConfigurator
from xrpl_credentials.errors import ResultCategory, SubmissionRejected
from xrpl_credentials.ledger import XRPLGateway
from xrpl_credentials.models import CredentialRequest
from xrpl_credentials.payments import NO_PERMISSION, PaymentService
from xrpl_credentials.store import CREDENTIAL_ID_KEY, KeyValueStore

CTYPE = "ExamCert"


class Harness:
    def __init__(self) -> None:
        self.ledger = FakeLedgerClient(ISSUER, SUBJECT, VERIFIER, STRANGER)
        gateway = XRPLGateway(self.ledger, poll_interval=0)
        self.credentials = CredentialClient(gateway)
        self.deposit_auth = DepositAuthConfigurator(gateway)
        self.payments = PaymentService(gateway)
        self.issuer = FakeSigner(ISSUER)
        self.subject = FakeSigner(SUBJECT)
        self.verifier = FakeSigner(VERIFIER)

    async def gate_verifier(self) -> None:
        await self.deposit_auth.ensure_deposit_auth_enabled(self.verifier)
        await self.deposit_auth.authorize_credential_type(self.verifier, ISSUER, CTYPE)

    async def certify(self, *, accept: bool = True, expiration: str | None = None) -> str:
        credential_id = await self.credentials.issue(
            self.issuer,
            CredentialRequest(subject=SUBJECT, credential_type=CTYPE, expiration=expiration),
        )
        if accept:
            await self.credentials.accept(self.subject, ISSUER, CTYPE)
        return credential_id


@pytest.fixture
def h() -> Harness:
    return Harness()


def _in(days: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).strftime("%Y-%m-%dT%H:%M:%SZ")


class TestPlainPayment:
    @pytest.mark.asyncio
    async def test_open_account(self, h: Harness) -> None:
        outcome = await h.payments.send(h.subject, VERIFIER, "1000000")
        assert outcome.engine_result == "tesSUCCESS"
        assert outcome.destination == VERIFIER
        assert outcome.amount_drops == "1000000"
        assert outcome.fee_drops == "12"
        assert outcome.credential_ids == ()

    @pytest.mark.asyncio
    async def test_send_xrp(self, h: Harness) -> None:
        outcome = await h.payments.send_xrp(h.subject, VERIFIER, "2.5")
        assert outcome.amount_drops == "2500000"
        assert h.subject.signed[-1]["Amount"] == "2500000"

    @pytest.mark.asyncio
    async def test_bad_amount(self, h: Harness) -> None:
        with pytest.raises(ValueError):
            await h.payments.send(h.subject, VERIFIER, "0")


class TestCredentialGatedPayment:
    @pytest.mark.asyncio
    async def test_with_credential(self, h: Harness) -> None:
        await h.gate_verifier()
        credential_id = await h.certify()
        outcome = await h.payments.send(h.subject, VERIFIER, "1000", [credential_id])
        assert outcome.credential_ids == (credential_id,)
        assert h.subject.signed[-1]["CredentialIDs"] == [credential_id]

    @pytest.mark.asyncio
    async def test_without_credential(self, h: Harness) -> None:
        await h.gate_verifier()
        await h.certify()
        with pytest.raises(SubmissionRejected) as exc_info:
            await h.payments.send(h.subject, VERIFIER, "1000")
        assert exc_info.value.code == NO_PERMISSION
        assert exc_info.value.category is ResultCategory.CLAIMED_COST

    @pytest.mark.asyncio
    async def test_unaccepted_credential(self, h: Harness) -> None:
        await h.gate_verifier()
        credential_id = await h.certify(accept=False)
        with pytest.raises(SubmissionRejected) as exc_info:
            await h.payments.send(h.subject, VERIFIER, "1000", [credential_id])
        assert exc_info.value.code == "tecBAD_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_expired_credential(self, h: Harness) -> None:
        await h.gate_verifier()
        expiration = _in(days=1)
        credential_id = await h.certify(expiration=expiration)
        h.ledger.close_time = encode_timestamp(expiration) + 60
        with pytest.raises(SubmissionRejected) as exc_info:
            await h.payments.send(h.subject, VERIFIER, "1000", [credential_id])
        assert exc_info.value.code == "tecBAD_CREDENTIALS"

    @pytest.mark.asyncio
    async def test_wrong_type(self, h: Harness) -> None:
        await h.deposit_auth.ensure_deposit_auth_enabled(h.verifier)
        await h.deposit_auth.authorize_credential_type(h.verifier, ISSUER, "OtherCert")
        credential_id = await h.certify()
        with pytest.raises(SubmissionRejected) as exc_info:
            await h.payments.send(h.subject, VERIFIER, "1000", [credential_id])
        assert exc_info.value.code == NO_PERMISSION

    @pytest.mark.asyncio
    async def test_address_preauth(self, h: Harness) -> None:
        await h.deposit_auth.ensure_deposit_auth_enabled(h.verifier)
        await h.deposit_auth.authorize_address(h.verifier, SUBJECT)
        outcome = await h.payments.send(h.subject, VERIFIER, "1000")
        assert outcome.engine_result == "tesSUCCESS"

    @pytest.mark.asyncio
    async def test_flag_without_lists_rejects_everyone(self, h: Harness) -> None:
        await h.deposit_auth.ensure_deposit_auth_enabled(h.verifier)
        with pytest.raises(SubmissionRejected):
            await h.payments.send(FakeSigner(STRANGER), VERIFIER, "1000")


class TestExamCertificationScenario:
    @pytest.mark.asyncio
    async def test_full_lifecycle(self, h: Harness) -> None:
        store = KeyValueStore()
        expiration = _in(days=365)

        credential_id = await h.credentials.issue(
            h.issuer,
            CredentialRequest(subject=SUBJECT, credential_type=CTYPE, expiration=expiration),
        )
        store.set(CREDENTIAL_ID_KEY, credential_id)

        [cred] = await h.credentials.list_credentials(SUBJECT)
        assert cred.accepted is False
        assert cred.expiration == expiration

        await h.credentials.accept(h.subject, ISSUER, CTYPE)
        [cred] = await h.credentials.list_credentials(SUBJECT)
        assert cred.accepted is True

        await h.gate_verifier()
        outcome = await h.payments.send_xrp(
            h.subject, VERIFIER, "10", [store.get(CREDENTIAL_ID_KEY)]
        )
        assert outcome.amount_drops == "10000000"

        await h.credentials.revoke(h.issuer, CTYPE, subject=SUBJECT)
        assert await h.credentials.list_credentials(SUBJECT) == []

        with pytest.raises(SubmissionRejected) as exc_info:
            await h.payments.send_xrp(h.subject, VERIFIER, "10", [credential_id])
        assert exc_info.value.code == "tecBAD_CREDENTIALS"
