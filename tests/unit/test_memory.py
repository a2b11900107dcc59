"""
Unit tests for sqlite_storage.memory
"""

from item_types import UserWithPrimaryKey
from sqlite_storage.memory import MemoryStorage


class TestMemoryStorage:
    """Test the in-memory collection"""

    def setup_method(self):
        self.store = MemoryStorage()
        self.alice = UserWithPrimaryKey("id1", "alice")
        self.bob = UserWithPrimaryKey("id2", "bob")

    def test_starts_empty(self):
        assert len(self.store) == 0
        assert self.store.count() == 0
        assert self.store.snapshot() == []

    def test_save_and_find(self):
        self.store.save("id1", self.alice)

        assert self.store.find("id1") is self.alice
        assert "id1" in self.store

    def test_find_missing_returns_none(self):
        assert self.store.find("missing") is None

    def test_save_overwrites(self):
        self.store.save("id1", self.alice)
        self.store.save("id1", self.bob)

        assert self.store.find("id1") is self.bob
        assert len(self.store) == 1

    def test_keys_are_normalized(self):
        """Test integer and string keys address the same item"""
        self.store.save(1, self.alice)

        assert self.store.find("1") is self.alice
        assert 1 in self.store
        assert self.store.keys() == ["1"]

    def test_replace_existing(self):
        self.store.save("id1", self.alice)

        assert self.store.replace("id1", self.bob) is True
        assert self.store.find("id1") is self.bob

    def test_replace_missing_does_not_insert(self):
        assert self.store.replace("id1", self.bob) is False
        assert "id1" not in self.store

    def test_remove(self):
        self.store.save("id1", self.alice)

        assert self.store.remove("id1") is True
        assert self.store.remove("id1") is False
        assert self.store.find("id1") is None

    def test_remove_key_holding_none(self):
        """Test a stored None still counts as present"""
        self.store.save("k", None)

        assert self.store.remove("k") is True

    def test_clear(self):
        self.store.save("id1", self.alice)
        self.store.save("id2", self.bob)

        self.store.clear()

        assert len(self.store) == 0

    def test_views(self):
        self.store.save("id1", self.alice)
        self.store.save("id2", self.bob)

        assert sorted(self.store.keys()) == ["id1", "id2"]
        assert sorted(v.name for v in self.store.values()) == ["alice", "bob"]
        assert dict(self.store.items()) == {"id1": self.alice, "id2": self.bob}
        assert sorted(u.name for u in self.store) == ["alice", "bob"]

    def test_snapshot_is_a_copy(self):
        """Test mutating the store does not change an earlier snapshot"""
        self.store.save("id1", self.alice)
        snapshot = self.store.snapshot()

        self.store.save("id2", self.bob)
        self.store.remove("id1")

        assert snapshot == [("id1", self.alice)]

    def test_iteration_tolerates_removal(self):
        self.store.save("id1", self.alice)
        self.store.save("id2", self.bob)

        for user in self.store:
            self.store.remove(user.id)

        assert len(self.store) == 0
