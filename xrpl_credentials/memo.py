"""
XRPL memo encoding for credential transactions.

A memo is informational only: the ledger never interprets it. Each of
the three fields is a blob and travels hex-encoded:

    {"Memo": {"MemoData": "...", "MemoType": "...", "MemoFormat": "..."}}

MemoType and MemoFormat are optional and omitted (not set to null)
when absent.

Structured payloads:
    ``json_memo()`` serializes a dict as canonical JSON (sorted keys, no
    whitespace, UTF-8) so that the same payload always produces the same
    MemoData bytes, and tags it with MemoFormat "application/json".

Size:
    XRPL rejects transactions whose memos exceed 1 KB in total. The
    limit is enforced here on the decoded bytes of all three fields.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any

from xrpl_credentials.codec import decode_hex, encode_text
from xrpl_credentials.errors import MalformedEncoding

logger = logging.getLogger(__name__)

# Maximum decoded bytes across all memo fields of one transaction.
MAX_MEMO_BYTES = 1024

JSON_MEMO_FORMAT = "application/json"


@dataclass(frozen=True)
class Memo:
    """A decoded memo.

    Attributes:
        data: Memo payload text.
        type: Optional type tag (e.g. "Certification").
        format: Optional MIME-like format tag (e.g. "text/plain").
    """

    data: str
    type: str | None = None
    format: str | None = None

    def byte_size(self) -> int:
        return sum(
            len(part.encode("utf-8"))
            for part in (self.data, self.type, self.format)
            if part is not None
        )

    def to_wire(self) -> dict[str, dict[str, str]]:
        """Hex-encode into the transaction's ``Memos`` entry shape."""
        fields: dict[str, str] = {"MemoData": encode_text(self.data)}
        if self.type is not None:
            fields["MemoType"] = encode_text(self.type)
        if self.format is not None:
            fields["MemoFormat"] = encode_text(self.format)
        return {"Memo": fields}

    @classmethod
    def from_wire(cls, entry: dict[str, Any]) -> Memo:
        """Decode one ``{"Memo": {...}}`` entry.

        Raises:
            MalformedEncoding: If a field is not hex-encoded UTF-8.
        """
        fields = entry.get("Memo", entry)
        memo_type = fields.get("MemoType")
        memo_format = fields.get("MemoFormat")
        return cls(
            data=decode_hex(fields.get("MemoData", "")),
            type=decode_hex(memo_type) if memo_type else None,
            format=decode_hex(memo_format) if memo_format else None,
        )

    def json_data(self) -> Any | None:
        """Parse ``data`` as JSON, or None if it is not JSON."""
        try:
            return json.loads(self.data)
        except ValueError:
            return None


def canonical_json(obj: Any) -> str:
    """
    Serialize object to canonical JSON string.

    Rules:
    - Keys sorted alphabetically (recursive)
    - No whitespace
    - UTF-8 (no ASCII escapes for non-ASCII chars)
    """
    return json.dumps(
        obj,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        allow_nan=False,
    )


def json_memo(payload: dict[str, Any], memo_type: str | None = None) -> Memo:
    """Build a memo carrying a canonical-JSON payload."""
    return Memo(data=canonical_json(payload), type=memo_type, format=JSON_MEMO_FORMAT)


def encode_memos(memos: list[Memo]) -> list[dict[str, dict[str, str]]]:
    """Encode memos for a transaction's ``Memos`` array.

    Raises:
        ValueError: If the combined decoded size exceeds MAX_MEMO_BYTES.
    """
    total = sum(memo.byte_size() for memo in memos)
    if total > MAX_MEMO_BYTES:
        raise ValueError(f"memos exceed {MAX_MEMO_BYTES} bytes (got {total} bytes)")
    return [memo.to_wire() for memo in memos]


def decode_first_memo(entries: list[dict[str, Any]] | None) -> Memo | None:
    """Decode the first memo of a ``Memos`` array, if any.

    A memo that is not UTF-8 text is informational only and decodes as
    None rather than failing the entry it is attached to.
    """
    if not entries:
        return None
    first = entries[0]
    if not isinstance(first, dict) or not isinstance(first.get("Memo"), dict):
        return None
    try:
        return Memo.from_wire(first)
    except MalformedEncoding as exc:
        logger.debug("Skipping undecodable memo: %s", exc)
        return None
