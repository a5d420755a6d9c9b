"""
Wire codec for credential fields.

Pure conversions between domain values and what the ledger stores:

    - Text ↔ hex. CredentialType, URI and memo fields are blobs on the
      ledger and travel as hex strings. Encoding emits uppercase hex,
      matching what rippled echoes back; decoding accepts either case.
    - ISO-8601 ↔ Ripple time. Ledger timestamps count seconds since
      2000-01-01T00:00:00Z (the "Ripple epoch"), stored as UInt32.
    - XRP ↔ drops. Amounts are integer drop strings on the wire.

No I/O, no state; safe from any thread or task.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

from xrpl_credentials.errors import InvalidTimestamp, MalformedEncoding

# Seconds between the Unix epoch and the Ripple epoch.
RIPPLE_EPOCH_OFFSET = 946684800

# Ledger time fields are UInt32.
MAX_RIPPLE_TIME = 2**32 - 1

DROPS_PER_XRP = Decimal(1_000_000)

_ISO_FORMAT = "%Y-%m-%dT%H:%M:%SZ"

_HEX_RE = re.compile(r"\A(?:[0-9A-Fa-f]{2})*\Z")


# =========================================================================
# Text ↔ hex
# =========================================================================


def encode_text(value: str | bytes) -> str:
    """Hex-encode text (UTF-8) or raw bytes for a blob field."""
    raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)
    return raw.hex().upper()


def decode_hex_bytes(value: str) -> bytes:
    """Decode a hex blob to raw bytes.

    Raises:
        MalformedEncoding: If value is not valid hex.
    """
    if not isinstance(value, str) or not _HEX_RE.match(value):
        raise MalformedEncoding(f"not a hex string: {value!r}")
    return bytes.fromhex(value)


def decode_hex(value: str) -> str:
    """Decode a hex blob back to the UTF-8 text it was built from.

    Raises:
        MalformedEncoding: If value is not hex, or the bytes are not UTF-8.
    """
    raw = decode_hex_bytes(value)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedEncoding(
            f"hex does not decode as UTF-8: {raw[:16].hex()}..."
        ) from exc


def decode_blob(value: str) -> str | bytes:
    """Decode an opaque hex blob: text when it is UTF-8, raw bytes otherwise.

    The ledger stores CredentialType and URI as arbitrary bytes, so a
    listing must not fail on entries other issuers wrote in binary.
    ``encode_text(decode_blob(h)) == h.upper()`` for every valid hex ``h``.

    Raises:
        MalformedEncoding: If value is not valid hex.
    """
    raw = decode_hex_bytes(value)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        return raw


def same_blob(a: str | bytes, b: str | bytes) -> bool:
    """Whether two blob values encode to the same bytes."""
    return encode_text(a) == encode_text(b)


# =========================================================================
# ISO-8601 ↔ Ripple time
# =========================================================================


def _parse_iso(value: str | datetime) -> datetime:
    if isinstance(value, datetime):
        moment = value
    else:
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            moment = datetime.fromisoformat(text)
        except ValueError as exc:
            raise InvalidTimestamp(f"not an ISO-8601 timestamp: {value!r}") from exc
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def encode_timestamp(value: str | datetime) -> int:
    """Convert an ISO-8601 timestamp (or datetime) to Ripple time.

    Naive values are treated as UTC. Sub-second precision is truncated.

    Raises:
        InvalidTimestamp: If unparseable, before the Ripple epoch, or past
            the UInt32 range.
    """
    moment = _parse_iso(value)
    ripple_time = int(moment.timestamp()) - RIPPLE_EPOCH_OFFSET
    if ripple_time < 0:
        raise InvalidTimestamp(f"{value!r} is before the Ripple epoch (2000-01-01)")
    if ripple_time > MAX_RIPPLE_TIME:
        raise InvalidTimestamp(f"{value!r} is beyond the ledger's time range")
    return ripple_time


def decode_timestamp(ripple_time: int) -> str:
    """Convert Ripple time to an ISO-8601 UTC string ("...Z").

    Raises:
        InvalidTimestamp: If ripple_time is negative or past UInt32.
    """
    if isinstance(ripple_time, bool) or not isinstance(ripple_time, int):
        raise InvalidTimestamp(f"ripple time must be an integer, got {ripple_time!r}")
    if ripple_time < 0 or ripple_time > MAX_RIPPLE_TIME:
        raise InvalidTimestamp(f"ripple time out of range: {ripple_time}")
    moment = datetime.fromtimestamp(ripple_time + RIPPLE_EPOCH_OFFSET, tz=timezone.utc)
    return moment.strftime(_ISO_FORMAT)


def now_ripple_time() -> int:
    return encode_timestamp(datetime.now(timezone.utc))


# =========================================================================
# XRP ↔ drops
# =========================================================================


def xrp_to_drops(amount: str | int | Decimal) -> str:
    """Convert an XRP amount to an integer drop string.

    Raises:
        ValueError: If negative, not a number, or finer than one drop.
    """
    try:
        xrp = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"not a number: {amount!r}") from None
    if not xrp.is_finite() or xrp < 0:
        raise ValueError(f"XRP amount must be a non-negative number, got {amount!r}")
    drops = xrp * DROPS_PER_XRP
    if drops != drops.to_integral_value():
        raise ValueError(f"XRP amount has more precision than one drop: {amount!r}")
    return str(int(drops))


def drops_to_xrp(drops: str | int) -> str:
    """Convert a drop amount to a normalized XRP string ("12.5", "0")."""
    try:
        value = Decimal(str(drops))
    except InvalidOperation:
        raise ValueError(f"not a drop amount: {drops!r}") from None
    if not value.is_finite() or value != value.to_integral_value() or value < 0:
        raise ValueError(f"drops must be a non-negative integer, got {drops!r}")
    xrp = value / DROPS_PER_XRP
    return format(xrp.normalize(), "f")
