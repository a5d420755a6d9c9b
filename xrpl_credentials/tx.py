"""
XRPL transaction builders for the credential lifecycle.

Each builder returns an unsigned transaction dict — the "transaction
recipe". Pure, deterministic, no secrets, no network calls. Sequence,
Fee, SigningPubKey and LastLedgerSequence are submit-time concerns and
are NOT included here; the signer autofills them.

Builders:
    - plan_credential_create — issuer creates a credential for a subject
    - plan_credential_accept — subject accepts a credential
    - plan_credential_delete — issuer, subject or anyone (after
      expiration) deletes a credential
    - plan_account_set_flag — set or clear an account flag
    - plan_deposit_preauth — add or remove an allow-list entry
    - plan_payment — XRP payment, optionally citing credential ids

All blob fields (CredentialType, URI) are expected already hex-encoded;
the services do the encoding via codec.py.
"""

from __future__ import annotations

from xrpl_credentials.memo import Memo, encode_memos

# AccountSet flag number for lsfDepositAuth (asfDepositAuth).
ASF_DEPOSIT_AUTH = 9

# Ledger limits on blob fields (decoded bytes; hex is twice as long).
MAX_CREDENTIAL_TYPE_BYTES = 64
MAX_URI_BYTES = 256

# Protocol limits on credential lists.
MAX_AUTHORIZE_CREDENTIALS = 8
MAX_CREDENTIAL_IDS = 8

_PREAUTH_FIELDS = ("Authorize", "Unauthorize", "AuthorizeCredentials", "UnauthorizeCredentials")


def _require(value: str, name: str) -> None:
    if not value:
        raise ValueError(f"{name} must be non-empty")


def _check_blob(value_hex: str, name: str, max_bytes: int) -> None:
    _require(value_hex, name)
    if len(value_hex) > max_bytes * 2:
        raise ValueError(f"{name} exceeds {max_bytes} bytes")


def plan_credential_create(
    account: str,
    subject: str,
    credential_type_hex: str,
    *,
    expiration: int | None = None,
    uri_hex: str | None = None,
    memos: list[Memo] | None = None,
) -> dict[str, object]:
    """Build an unsigned CredentialCreate transaction.

    Args:
        account: Issuer r-address (the signer).
        subject: r-address the credential is about.
        credential_type_hex: Hex-encoded credential type (1-64 bytes).
        expiration: Optional expiration in Ripple time.
        uri_hex: Optional hex-encoded URI (up to 256 bytes).
        memos: Optional memos attached to the transaction.

    Returns:
        Unsigned transaction dict in XRPL JSON format.

    Raises:
        ValueError: On empty addresses or oversized/empty blobs.
    """
    _require(account, "account")
    _require(subject, "subject")
    _check_blob(credential_type_hex, "credential_type", MAX_CREDENTIAL_TYPE_BYTES)

    tx: dict[str, object] = {
        "TransactionType": "CredentialCreate",
        "Account": account,
        "Subject": subject,
        "CredentialType": credential_type_hex,
    }
    if expiration is not None:
        tx["Expiration"] = expiration
    if uri_hex is not None:
        _check_blob(uri_hex, "uri", MAX_URI_BYTES)
        tx["URI"] = uri_hex
    if memos:
        tx["Memos"] = encode_memos(memos)
    return tx


def plan_credential_accept(
    account: str,
    issuer: str,
    credential_type_hex: str,
) -> dict[str, object]:
    """Build an unsigned CredentialAccept transaction.

    The signer is the subject, so there is no Subject field.
    """
    _require(account, "account")
    _require(issuer, "issuer")
    _check_blob(credential_type_hex, "credential_type", MAX_CREDENTIAL_TYPE_BYTES)
    return {
        "TransactionType": "CredentialAccept",
        "Account": account,
        "Issuer": issuer,
        "CredentialType": credential_type_hex,
    }


def plan_credential_delete(
    account: str,
    credential_type_hex: str,
    *,
    subject: str | None = None,
    issuer: str | None = None,
) -> dict[str, object]:
    """Build an unsigned CredentialDelete transaction.

    At least one of subject or issuer is required; the missing one
    defaults to the signing account on the ledger side.

    Raises:
        ValueError: If neither subject nor issuer is given.
    """
    _require(account, "account")
    _check_blob(credential_type_hex, "credential_type", MAX_CREDENTIAL_TYPE_BYTES)
    if not subject and not issuer:
        raise ValueError("either subject or issuer is required")

    tx: dict[str, object] = {
        "TransactionType": "CredentialDelete",
        "Account": account,
        "CredentialType": credential_type_hex,
    }
    if subject:
        tx["Subject"] = subject
    if issuer:
        tx["Issuer"] = issuer
    return tx


def plan_account_set_flag(
    account: str,
    flag: int,
    *,
    clear: bool = False,
) -> dict[str, object]:
    """Build an unsigned AccountSet that sets (or clears) one flag."""
    _require(account, "account")
    if flag <= 0:
        raise ValueError(f"flag must be a positive asf value, got {flag}")
    return {
        "TransactionType": "AccountSet",
        "Account": account,
        "ClearFlag" if clear else "SetFlag": flag,
    }


def _credential_list(pairs: list[tuple[str, str]]) -> list[dict[str, dict[str, str]]]:
    if not pairs:
        raise ValueError("at least one (issuer, credential_type) pair is required")
    if len(pairs) > MAX_AUTHORIZE_CREDENTIALS:
        raise ValueError(
            f"at most {MAX_AUTHORIZE_CREDENTIALS} credentials per entry, got {len(pairs)}"
        )
    if len(set(pairs)) != len(pairs):
        raise ValueError("duplicate (issuer, credential_type) pair")
    entries = []
    for issuer, credential_type_hex in pairs:
        _require(issuer, "issuer")
        _check_blob(credential_type_hex, "credential_type", MAX_CREDENTIAL_TYPE_BYTES)
        entries.append({"Credential": {"Issuer": issuer, "CredentialType": credential_type_hex}})
    return entries


def plan_deposit_preauth(
    account: str,
    *,
    authorize: str | None = None,
    unauthorize: str | None = None,
    authorize_credentials: list[tuple[str, str]] | None = None,
    unauthorize_credentials: list[tuple[str, str]] | None = None,
) -> dict[str, object]:
    """Build an unsigned DepositPreauth transaction.

    Exactly one of the four operations must be given. Credential lists
    are (issuer, credential_type_hex) pairs; the list submitted is the
    complete set for that ledger entry, not a delta.

    Raises:
        ValueError: Unless exactly one operation is given, or on invalid
            entries.
    """
    _require(account, "account")
    chosen = [
        name
        for name, value in zip(
            _PREAUTH_FIELDS,
            (authorize, unauthorize, authorize_credentials, unauthorize_credentials),
        )
        if value
    ]
    if len(chosen) != 1:
        raise ValueError(f"exactly one of {', '.join(_PREAUTH_FIELDS)} is required")

    tx: dict[str, object] = {"TransactionType": "DepositPreauth", "Account": account}
    if authorize:
        if authorize == account:
            raise ValueError("an account cannot preauthorize itself")
        tx["Authorize"] = authorize
    elif unauthorize:
        tx["Unauthorize"] = unauthorize
    elif authorize_credentials:
        tx["AuthorizeCredentials"] = _credential_list(authorize_credentials)
    else:
        tx["UnauthorizeCredentials"] = _credential_list(unauthorize_credentials or [])
    return tx


def plan_payment(
    account: str,
    destination: str,
    amount_drops: str,
    *,
    credential_ids: list[str] | None = None,
) -> dict[str, object]:
    """Build an unsigned XRP Payment, optionally citing credentials.

    Args:
        account: Sender r-address.
        destination: Recipient r-address.
        amount_drops: Integer drop amount as a string.
        credential_ids: Credential ledger-entry ids proving the sender is
            preauthorized by the recipient.

    Raises:
        ValueError: On empty or non-integer amount, or invalid ids.
    """
    _require(account, "account")
    _require(destination, "destination")
    if not amount_drops.isdigit() or int(amount_drops) <= 0:
        raise ValueError(f"amount_drops must be a positive integer string, got {amount_drops!r}")

    tx: dict[str, object] = {
        "TransactionType": "Payment",
        "Account": account,
        "Destination": destination,
        "Amount": amount_drops,
    }
    if credential_ids:
        if len(credential_ids) > MAX_CREDENTIAL_IDS:
            raise ValueError(f"at most {MAX_CREDENTIAL_IDS} credential ids, got {len(credential_ids)}")
        if len(set(credential_ids)) != len(credential_ids):
            raise ValueError("duplicate credential id")
        tx["CredentialIDs"] = list(credential_ids)
    return tx
