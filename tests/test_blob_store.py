"""
Tests for the blob stores and their capacity limit
"""

import pytest

from exceptions import StorageFullError
from storage.blob_store import FileBlobStore, MemoryBlobStore


class TestMemoryBlobStore:

    def test_set_get_remove(self):
        store = MemoryBlobStore()
        store.set("shoppingList", "[]")

        assert store.get("shoppingList") == "[]"
        assert store.keys() == ["shoppingList"]

        store.remove("shoppingList")
        store.remove("shoppingList")
        assert store.get("shoppingList") is None

    def test_quota_exceeded_keeps_previous_value(self):
        store = MemoryBlobStore(quota_bytes=10)
        store.set("a", "12345")

        with pytest.raises(StorageFullError) as exc_info:
            store.set("a", "x" * 11)

        assert exc_info.value.key == "a"
        assert store.get("a") == "12345"

    def test_quota_counts_other_keys(self):
        store = MemoryBlobStore(quota_bytes=10)
        store.set("a", "123456")

        with pytest.raises(StorageFullError):
            store.set("b", "12345")

    def test_overwrite_only_counts_new_size(self):
        store = MemoryBlobStore(quota_bytes=10)
        store.set("a", "1234567890")
        store.set("a", "0987654321")

        assert store.used_bytes() == 10

    def test_utf8_size(self):
        store = MemoryBlobStore(quota_bytes=3)
        with pytest.raises(StorageFullError):
            store.set("a", "öö")


class TestFileBlobStore:

    def test_persists_across_instances(self, tmp_path):
        FileBlobStore(str(tmp_path)).set("savedRecipes", '[{"recipeName": "Käsespätzle"}]')

        store = FileBlobStore(str(tmp_path))
        assert store.get("savedRecipes") == '[{"recipeName": "Käsespätzle"}]'
        assert (tmp_path / "savedRecipes.json").exists()
        assert store.keys() == ["savedRecipes"]

    def test_missing_key(self, tmp_path):
        assert FileBlobStore(str(tmp_path)).get("recipeDraft") is None

    def test_quota(self, tmp_path):
        store = FileBlobStore(str(tmp_path), quota_bytes=4)

        with pytest.raises(StorageFullError):
            store.set("shoppingList", "[1, 2]")
        assert store.get("shoppingList") is None

    def test_remove(self, tmp_path):
        store = FileBlobStore(str(tmp_path))
        store.set("recipeDraft", "{}")
        store.remove("recipeDraft")

        assert store.get("recipeDraft") is None
        assert store.size_of("recipeDraft") == 0
