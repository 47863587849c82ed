"""
Tests for the key-value store backends.
"""

import pytest

from snaptheplant.storage.store import InMemoryStore, JsonFileStore, StoreError, create_store


@pytest.fixture(params=["memory", "json"])
def any_store(request, tmp_path):
    """Each backend behind the same interface."""
    if request.param == "memory":
        return InMemoryStore()
    return JsonFileStore(str(tmp_path / "store"))


class TestKeyValueStore:
    """Behaviour shared by all backends."""

    def test_missing_key_returns_default(self, any_store):
        assert any_store.get("nope") is None
        assert any_store.get("nope", []) == []

    def test_put_then_get(self, any_store):
        any_store.put("rate_limit:user-1", {"count": 3, "date": "2024-01-02"})
        assert any_store.get("rate_limit:user-1") == {"count": 3, "date": "2024-01-02"}

    def test_overwrite(self, any_store):
        any_store.put("k", 1)
        any_store.put("k", 2)
        assert any_store.get("k") == 2

    def test_delete(self, any_store):
        any_store.put("k", 1)
        assert any_store.delete("k") is True
        assert any_store.delete("k") is False
        assert any_store.get("k") is None

    def test_keys_by_prefix_sorted(self, any_store):
        for key in ["species:2", "species:1", "collection:anonymous", "image_cache:1"]:
            any_store.put(key, {})
        assert any_store.keys("species:") == ["species:1", "species:2"]
        assert len(any_store.keys()) == 4

    def test_values_are_copies(self, any_store):
        value = {"items": [1]}
        any_store.put("k", value)
        value["items"].append(2)

        loaded = any_store.get("k")
        loaded["items"].append(3)

        assert any_store.get("k") == {"items": [1]}


class TestJsonFileStore:
    """File backend specifics."""

    def test_persists_across_instances(self, tmp_path):
        JsonFileStore(str(tmp_path)).put("collection:user@example.com", [{"a": 1}])
        assert JsonFileStore(str(tmp_path)).get("collection:user@example.com") == [{"a": 1}]

    def test_unsafe_key_characters_round_trip(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        store.put("a/b:c %d", 1)
        assert store.keys() == ["a/b:c %d"]
        assert len(list(tmp_path.glob("*.json"))) == 1

    def test_non_latin_keys_listed_intact(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        keys = ["collection:z\u00fcrich", "collection:\u5c71\u7530", "collection:\U0001f41d"]
        for key in keys:
            store.put(key, [])

        assert store.keys("collection:") == sorted(keys)
        assert JsonFileStore(str(tmp_path)).get("collection:\u5c71\u7530") == []

    def test_corrupt_file_raises_store_error(self, tmp_path):
        store = JsonFileStore(str(tmp_path))
        store.put("k", 1)
        next(tmp_path.glob("*.json")).write_text("{not json")

        with pytest.raises(StoreError):
            store.get("k")

    def test_unserializable_value_raises_store_error(self, tmp_path):
        with pytest.raises(StoreError):
            JsonFileStore(str(tmp_path)).put("k", object())


class TestCreateStore:

    def test_backends(self, tmp_path):
        assert isinstance(create_store("memory", ""), InMemoryStore)
        assert isinstance(create_store("json", str(tmp_path)), JsonFileStore)

    def test_unknown_backend(self):
        with pytest.raises(ValueError):
            create_store("redis", "")
