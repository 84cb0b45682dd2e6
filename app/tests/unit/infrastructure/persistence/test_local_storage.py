"""Unit tests for LocalStorage."""

import pytest

from infrastructure.persistence import LocalStorage

pytestmark = pytest.mark.unit


class TestLocalStorage:
    def test_missing_key_returns_none(self, local_storage):
        assert local_storage.get_item("last_sync_time") is None
        assert local_storage.get_json("backup_1") is None

    def test_set_and_get(self, local_storage):
        local_storage.set_item("last_sync_time", "2024-05-01T12:00:00+00:00")

        assert local_storage.get_item("last_sync_time") == "2024-05-01T12:00:00+00:00"

    def test_overwrite(self, local_storage):
        local_storage.set_item("key", "one")
        local_storage.set_item("key", "two")

        assert local_storage.get_item("key") == "two"

    def test_creates_directory_lazily(self, tmp_path):
        storage = LocalStorage(tmp_path / "nested" / "state")

        assert storage.keys() == []
        storage.set_item("key", "value")

        assert (tmp_path / "nested" / "state").is_dir()

    def test_values_survive_new_instance(self, tmp_path):
        LocalStorage(tmp_path).set_item("key", "persisted")

        assert LocalStorage(tmp_path).get_item("key") == "persisted"

    def test_remove_item(self, local_storage):
        local_storage.set_item("key", "value")

        assert local_storage.remove_item("key") is True
        assert local_storage.remove_item("key") is False
        assert local_storage.get_item("key") is None

    def test_keys_sorted_without_temporary_files(self, local_storage):
        local_storage.set_item("b", "2")
        local_storage.set_item("a", "1")
        (local_storage.directory / ".tmp-leftover").write_text("x")

        assert local_storage.keys() == ["a", "b"]

    def test_json_round_trip_keeps_unicode(self, local_storage):
        local_storage.set_json("backup_1", {"title": "Café", "items": [1, 2]})

        assert local_storage.get_json("backup_1") == {"title": "Café", "items": [1, 2]}
        assert "Café" in local_storage.get_item("backup_1")

    @pytest.mark.parametrize("key", ["", "../escape", "a/b", ".hidden", "with space"])
    def test_invalid_keys_rejected(self, local_storage, key):
        with pytest.raises(ValueError):
            local_storage.set_item(key, "value")
