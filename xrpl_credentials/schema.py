"""
JSON Schemas for the ledger objects this package decodes.

Responses are checked once, here, before any field is read. A shape
mismatch surfaces as ResponseMalformed instead of a KeyError or
TypeError at some later use site. Blob contents (hex, UTF-8) are
checked by the codec, not by these schemas.
"""

from __future__ import annotations

from typing import Any

import jsonschema  # type: ignore[import-untyped]

from xrpl_credentials.errors import ResponseMalformed

_BLOB = {"type": "string"}
_ADDRESS = {"type": "string", "minLength": 1}
_UINT32 = {"type": "integer", "minimum": 0, "maximum": 4294967295}

CREDENTIAL_ENTRY_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["Issuer", "Subject", "CredentialType"],
    "properties": {
        "Issuer": _ADDRESS,
        "Subject": _ADDRESS,
        "CredentialType": _BLOB,
        "Flags": _UINT32,
        "Expiration": _UINT32,
        "URI": _BLOB,
        "Memos": {"type": "array"},
        "index": {"type": "string"},
        "LedgerIndex": {"type": "string"},
    },
}

CREDENTIAL_PAIR_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["Issuer", "CredentialType"],
    "properties": {
        "Issuer": _ADDRESS,
        "CredentialType": _BLOB,
    },
}

ACCOUNT_INFO_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["account_data"],
    "properties": {
        "account_data": {
            "type": "object",
            "required": ["Flags"],
            "properties": {"Flags": _UINT32},
        },
    },
}


def validate(instance: Any, schema: dict[str, Any], kind: str) -> None:
    """Validate ``instance`` against ``schema``.

    Raises:
        ResponseMalformed: Naming ``kind`` and the first violation.
    """
    try:
        jsonschema.validate(instance=instance, schema=schema)
    except jsonschema.ValidationError as exc:
        raise ResponseMalformed(f"{kind}: {exc.message}") from exc
