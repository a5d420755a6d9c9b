"""
Tests for KeyValueStore — SQLite handoff of values between scripts.

Covers:
- get/set/delete/keys on an in-memory store
- Overwrite keeps the latest value and refreshes updated_at
- A file-backed store is visible to a second instance
- Empty keys rejected
"""

from pathlib import Path

import pytest

from xrpl_credentials.store import CREDENTIAL_ID_KEY, KeyValueStore


@pytest.fixture
def memory_store() -> KeyValueStore:
    return KeyValueStore(":memory:")


class TestBasics:
    def test_missing_returns_default(self, memory_store: KeyValueStore) -> None:
        assert memory_store.get("nope") is None
        assert memory_store.get("nope", "fallback") == "fallback"

    def test_set_get(self, memory_store: KeyValueStore) -> None:
        memory_store.set(CREDENTIAL_ID_KEY, "A" * 64)
        assert memory_store.get(CREDENTIAL_ID_KEY) == "A" * 64

    def test_overwrite(self, memory_store: KeyValueStore) -> None:
        memory_store.set("k", "one", updated_at="2025-01-01T00:00:00+00:00")
        memory_store.set("k", "two")
        assert memory_store.get("k") == "two"
        assert memory_store.updated_at("k") != "2025-01-01T00:00:00+00:00"

    def test_delete(self, memory_store: KeyValueStore) -> None:
        memory_store.set("k", "v")
        assert memory_store.delete("k") is True
        assert memory_store.delete("k") is False
        assert memory_store.get("k") is None

    def test_keys_sorted(self, memory_store: KeyValueStore) -> None:
        memory_store.set("b", "2")
        memory_store.set("a", "1")
        assert memory_store.keys() == ["a", "b"]

    def test_empty_key(self, memory_store: KeyValueStore) -> None:
        with pytest.raises(ValueError):
            memory_store.set("", "v")

    def test_updated_at_missing(self, memory_store: KeyValueStore) -> None:
        assert memory_store.updated_at("nope") is None


class TestPersistence:
    def test_shared_file(self, tmp_path: Path) -> None:
        db_path = tmp_path / "credentials.db"
        KeyValueStore(db_path).set(CREDENTIAL_ID_KEY, "B" * 64)
        assert KeyValueStore(db_path).get(CREDENTIAL_ID_KEY) == "B" * 64
