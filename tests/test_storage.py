"""
Tests for the JSON-file storage layer.
"""

import json
from pathlib import Path

import pytest

from homebrew_srd.models import ContentType
from homebrew_srd.storage import (
    HomebrewStorage,
    InvalidRecordError,
    RecordNotFoundError,
    UnknownCollectionError,
    format_storage_size,
    resolve_collection,
)


@pytest.fixture
def storage(temp_storage_dir: Path) -> HomebrewStorage:
    return HomebrewStorage(data_dir=temp_storage_dir)


class TestRawJson:

    def test_round_trip(self, storage: HomebrewStorage):
        assert storage.save_json("settings", {"theme": "dark"}) is True
        assert storage.load_json("settings") == {"theme": "dark"}

    def test_missing_key_returns_default(self, storage: HomebrewStorage):
        assert storage.load_json("nothing") is None
        assert storage.load_json("nothing", default=[]) == []

    def test_corrupt_file_returns_default(self, storage: HomebrewStorage):
        (storage.data_dir / "spells.json").write_text("{not json", encoding="utf-8")
        assert storage.load_json("spells", default=[]) == []
        assert storage.list("spells") == []

    def test_unserialisable_data_is_not_saved(self, storage: HomebrewStorage):
        assert storage.save_json("bad", {"value": object()}) is False


class TestCollections:

    def test_resolve_collection(self):
        assert resolve_collection("Spells ") is ContentType.SPELLS
        assert resolve_collection(ContentType.WORLDS) is ContentType.WORLDS
        with pytest.raises(UnknownCollectionError):
            resolve_collection("adventures")

    def test_add_assigns_id_and_timestamps(self, storage: HomebrewStorage):
        record = storage.add("spells", {"name": "Arcane Blade", "level": 7, "id": "ignored"})

        assert record["id"] != "ignored"
        assert len(record["id"]) == 8
        assert record["createdAt"] == record["updatedAt"]
        assert record["level"] == 7
        assert record["isSrdCompliant"] is True
        assert storage.list("spells") == [record]

    def test_add_stamps_non_compliance(self, storage: HomebrewStorage):
        record = storage.add("monsters", {"name": "Mind Flayer", "isSrdCompliant": True})
        assert record["isSrdCompliant"] is False

    def test_type_specific_fields_use_collection_tag(self, storage: HomebrewStorage):
        character = storage.add("characters", {"name": "Elara", "race": "Tabaxi"})
        npc = storage.add("npcs", {"name": "Elara", "race": "Tabaxi"})
        assert character["isSrdCompliant"] is False
        assert npc["isSrdCompliant"] is True

    @pytest.mark.parametrize(
        "collection,tag",
        [("subclasses", "subclass"), ("backgrounds", "background"), ("feats", "feat")],
    )
    def test_character_option_collections(self, storage: HomebrewStorage, collection, tag):
        assert resolve_collection(collection).tag == tag
        # generic checks only: a protected subclass name is still caught by the name scan
        flagged = storage.add(collection, {"name": "Oath of Glory"})
        clean = storage.add(collection, {"name": "Oath of Embers", "race": "Tabaxi", "class": "Hexblade"})

        assert flagged["isSrdCompliant"] is False
        assert clean["isSrdCompliant"] is True
        assert [r["id"] for r in storage.list(collection)] == [flagged["id"], clean["id"]]

    def test_get(self, storage: HomebrewStorage):
        record = storage.add("items", {"name": "Cloak of Shadows"})
        assert storage.get("items", record["id"]) == record
        with pytest.raises(RecordNotFoundError):
            storage.get("items", "missing")

    def test_update_revalidates(self, storage: HomebrewStorage):
        record = storage.add("worlds", {"name": "Aster", "genre": "High Fantasy"})
        updated = storage.update("worlds", record["id"], {"genre": "Forgotten Realms"})

        assert updated["id"] == record["id"]
        assert updated["createdAt"] == record["createdAt"]
        assert updated["genre"] == "Forgotten Realms"
        assert updated["isSrdCompliant"] is False
        assert storage.get("worlds", record["id"])["isSrdCompliant"] is False

    def test_update_keeps_created_at(self, storage: HomebrewStorage):
        record = storage.add("spells", {"name": "Force Grip"})
        updated = storage.update("spells", record["id"], {"createdAt": "1999-01-01", "id": "other"})

        assert updated["createdAt"] == record["createdAt"]
        assert updated["id"] == record["id"]
        assert storage.get("spells", record["id"])["createdAt"] == record["createdAt"]

    def test_update_missing(self, storage: HomebrewStorage):
        with pytest.raises(RecordNotFoundError):
            storage.update("worlds", "missing", {"name": "x"})

    def test_invalid_record(self, storage: HomebrewStorage):
        with pytest.raises(InvalidRecordError):
            storage.add("spells", {"name": ["not", "a", "string"]})

    def test_delete(self, storage: HomebrewStorage):
        keep = storage.add("factions", {"name": "Silver Hand"})
        drop = storage.add("factions", {"name": "Zhentarim"})

        removed = storage.delete("factions", drop["id"])
        assert removed["name"] == "Zhentarim"
        assert storage.list("factions") == [keep]
        with pytest.raises(RecordNotFoundError):
            storage.delete("factions", drop["id"])

    def test_import_replaces_collection(self, storage: HomebrewStorage):
        storage.add("spells", {"name": "Old Spell"})
        count = storage.import_records("spells", [
            {"id": "abc12345", "name": "Bigby's Hand", "isSrdCompliant": True},
            {"id": "def67890", "name": "Force Grip"},
        ])

        assert count == 2
        spells = storage.list("spells")
        assert [s["id"] for s in spells] == ["abc12345", "def67890"]
        assert [s["isSrdCompliant"] for s in spells] == [False, True]

    def test_import_none_is_ignored(self, storage: HomebrewStorage):
        storage.add("spells", {"name": "Force Grip"})
        assert storage.import_records("spells", None) == 1

    def test_collection_file_layout(self, storage: HomebrewStorage):
        storage.add("races", {"name": "Stoneborn"})
        data = json.loads((storage.data_dir / "races.json").read_text(encoding="utf-8"))
        assert isinstance(data, list)
        assert data[0]["name"] == "Stoneborn"

    def test_non_list_collection_file_is_ignored(self, storage: HomebrewStorage):
        storage.save_json("items", {"name": "oops"})
        assert storage.list("items") == []

    def test_all_records_skips_empty(self, storage: HomebrewStorage):
        storage.add("spells", {"name": "Force Grip"})
        assert list(storage.all_records()) == ["spells"]


class TestStorageSize:

    def test_size_counts_stored_characters(self, storage: HomebrewStorage):
        assert storage.storage_size_kb() == 0
        storage.save_json("notes", "x" * 510)  # 512 characters with quotes
        assert storage.storage_size_kb() == pytest.approx(1.0)

    @pytest.mark.parametrize(
        "size,expected",
        [(0, "0 KB"), (12.3456, "12.35 KB"), (1023.5, "1023.5 KB"), (1024, "1 MB"), (1536, "1.5 MB")],
    )
    def test_format_storage_size(self, size, expected):
        assert format_storage_size(size) == expected
