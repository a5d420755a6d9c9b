"""
Tests for memo encoding.

Test plan:
- Wire shape: MemoData always present, MemoType/MemoFormat omitted when None
- Decoding: round trip through the wire shape, lowercase hex accepted
- JSON memos: canonical bytes regardless of key order, json_data parses
- Size: exactly MAX_MEMO_BYTES accepted, one byte over rejected
- decode_first_memo: None/empty/garbage/non-UTF-8 → None
"""

import pytest

from xrpl_credentials.memo import (
    JSON_MEMO_FORMAT,
    MAX_MEMO_BYTES,
    Memo,
    canonical_json,
    decode_first_memo,
    encode_memos,
    json_memo,
)


class TestWireShape:
    def test_data_only(self) -> None:
        assert Memo(data="hi").to_wire() == {"Memo": {"MemoData": "6869"}}

    def test_all_fields(self) -> None:
        wire = Memo(data="hi", type="Note", format="text/plain").to_wire()
        assert wire == {
            "Memo": {
                "MemoData": "6869",
                "MemoType": "4E6F7465",
                "MemoFormat": "746578742F706C61696E",
            }
        }

    def test_from_wire(self) -> None:
        memo = Memo(data="Passed with distinction", type="Certification")
        assert Memo.from_wire(memo.to_wire()) == memo

    def test_from_wire_lowercase(self) -> None:
        assert Memo.from_wire({"Memo": {"MemoData": "6869", "MemoType": "4e6f7465"}}) == Memo(
            data="hi", type="Note"
        )


class TestJsonMemo:
    def test_canonical_regardless_of_order(self) -> None:
        a = json_memo({"score": 92, "exam": "XRPL-101"})
        b = json_memo({"exam": "XRPL-101", "score": 92})
        assert a.data == b.data == '{"exam":"XRPL-101","score":92}'
        assert a.format == JSON_MEMO_FORMAT

    def test_json_data(self) -> None:
        assert json_memo({"ok": True}).json_data() == {"ok": True}
        assert Memo(data="not json").json_data() is None

    def test_canonical_json_unicode(self) -> None:
        assert canonical_json({"name": "Zoë"}) == '{"name":"Zoë"}'

    def test_nan_rejected(self) -> None:
        with pytest.raises(ValueError):
            canonical_json({"x": float("nan")})


class TestSize:
    def test_exactly_at_limit(self) -> None:
        encoded = encode_memos([Memo(data="a" * MAX_MEMO_BYTES)])
        assert len(encoded) == 1

    def test_over_limit_across_memos(self) -> None:
        memos = [Memo(data="a" * 600), Memo(data="b" * 421, type="xyz", format="t")]
        with pytest.raises(ValueError, match="exceed"):
            encode_memos(memos)

    def test_multibyte_counted_in_bytes(self) -> None:
        assert Memo(data="é").byte_size() == 2


class TestDecodeFirst:
    @pytest.mark.parametrize("entries", [None, [], [{"nope": 1}], ["x"]])
    def test_absent(self, entries: object) -> None:
        assert decode_first_memo(entries) is None  # type: ignore[arg-type]

    def test_first_wins(self) -> None:
        entries = [Memo(data="one").to_wire(), Memo(data="two").to_wire()]
        assert decode_first_memo(entries) == Memo(data="one")

    def test_binary_memo_is_skipped(self) -> None:
        assert decode_first_memo([{"Memo": {"MemoData": "FFFE"}}]) is None
