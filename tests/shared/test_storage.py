"""Tests for shared/storage.py."""

import json

import pytest

from ecobazaar.shared.storage import (
    FileStorage,
    ISessionStorage,
    MemoryStorage,
    SessionStore,
)


class TestMemoryStorage:
    def test_implements_protocol(self):
        assert isinstance(MemoryStorage(), ISessionStorage)

    def test_set_get_remove(self):
        storage = MemoryStorage()
        storage.set_item("k", "v")
        assert storage.get_item("k") == "v"
        storage.remove_item("k")
        assert storage.get_item("k") is None

    def test_remove_missing_key(self):
        """Removing an absent key should not raise."""
        MemoryStorage().remove_item("missing")


class TestFileStorage:
    def test_implements_protocol(self, tmp_path):
        assert isinstance(FileStorage(tmp_path / "s.json"), ISessionStorage)

    def test_survives_new_instance(self, tmp_path):
        """Values should be visible to a fresh instance (a process restart)."""
        path = tmp_path / "nested" / "session.json"
        FileStorage(path).set_item("token", "abc")
        assert FileStorage(path).get_item("token") == "abc"

    def test_remove_item(self, tmp_path):
        path = tmp_path / "session.json"
        storage = FileStorage(path)
        storage.set_item("a", "1")
        storage.set_item("b", "2")
        storage.remove_item("a")
        assert json.loads(path.read_text()) == {"b": "2"}

    def test_unreadable_file_treated_as_empty(self, tmp_path):
        """A corrupted file should read as empty instead of raising."""
        path = tmp_path / "session.json"
        path.write_text("{not json")
        storage = FileStorage(path)
        assert storage.get_item("token") is None
        storage.set_item("token", "fresh")
        assert storage.get_item("token") == "fresh"

    def test_missing_file(self, tmp_path):
        assert FileStorage(tmp_path / "nope.json").get_item("token") is None


class FailingUserWrites(MemoryStorage):
    """Storage that accepts the token but fails writing the user record."""

    def set_item(self, key, value):
        if key == "ecobazaar_user":
            raise OSError("disk full")
        super().set_item(key, value)


class TestSessionStore:
    def test_save_writes_both_entries(self, storage, store):
        store.save("t1", {"id": 1, "role": "USER"})
        assert storage.get_item("ecobazaar_token") == "t1"
        assert json.loads(storage.get_item("ecobazaar_user")) == {"id": 1, "role": "USER"}

    def test_clear_removes_both_entries(self, storage, store):
        store.save("t1", {"id": 1})
        store.clear()
        assert store.read() == (None, None)
        assert storage.keys() == []

    def test_clear_is_idempotent(self, store):
        store.clear()
        store.clear()
        assert store.token is None

    def test_failed_save_keeps_neither_entry(self, settings):
        """A half-written session should be rolled back."""
        storage = FailingUserWrites()
        store = SessionStore(storage, settings)
        with pytest.raises(OSError):
            store.save("t1", {"id": 1})
        assert storage.get_item("ecobazaar_token") is None
        assert storage.get_item("ecobazaar_user") is None

    def test_empty_token_reads_as_none(self, storage, store):
        storage.set_item("ecobazaar_token", "")
        assert store.token is None

    def test_custom_keys(self, storage, settings):
        custom = settings.model_copy(update={"token_storage_key": "tok", "user_storage_key": "usr"})
        store = SessionStore(storage, custom)
        store.save("t2", {"id": 2})
        assert storage.get_item("tok") == "t2"
        assert storage.get_item("usr") is not None
