"""Tests for the JSON world store, update merging and backups."""

import json
import math
import zipfile

import pytest

from core.notify import LoggingNotifier
from core.settings import MIGRATION_SETTING, SettingsStore, register_system_settings
from modules.migration import migrate_world
from storage.backup import create_backup
from storage.engine import JsonWorldStore, RecordNotFound, SchemaViolation
from storage.merge import apply_update, expand
from tests.factories import make_legacy_character, make_scene


def _write(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


@pytest.fixture
def world(tmp_path):
    _write(tmp_path / "actors" / "a1.json", make_legacy_character())
    _write(tmp_path / "scenes" / "s1.json", make_scene())
    return tmp_path


class TestApplyUpdate:
    def test_dotted_keys_expand(self):
        assert expand({"prototypeToken.actorLink": True}) == {"prototypeToken": {"actorLink": True}}

    def test_deletion_marker_removes_key(self):
        doc = {"attributes": {"insight": {"label": "x"}, "body": {}}}
        merged = apply_update(doc, {"attributes": {"-=insight": None, "intuition": {"label": "y"}}})
        assert merged == {"attributes": {"body": {}, "intuition": {"label": "y"}}}
        assert "insight" in doc["attributes"]

    def test_nested_mappings_merge(self):
        doc = {"prototypeToken": {"actorLink": False, "name": "Vex"}}
        assert apply_update(doc, {"prototypeToken.actorLink": True}) == {
            "prototypeToken": {"actorLink": True, "name": "Vex"}
        }

    def test_empty_mapping_clears(self):
        assert apply_update({"actorData": {"name": "x"}}, {"actorData": {}}) == {"actorData": {}}

    def test_plain_lists_replace(self):
        assert apply_update({"tokens": [{"_id": "t0"}, {"_id": "t1"}]}, {"tokens": [{"_id": "t9"}]}) == {
            "tokens": [{"_id": "t9"}]
        }

    def test_effects_merge_by_id(self):
        doc = {"effects": [{"_id": "e1", "label": "Trained", "changes": [{"key": "old"}]}, {"_id": "e2"}]}
        merged = apply_update(doc, {"effects": [{"_id": "e1", "changes": [{"key": "new"}]}]})
        assert merged["effects"] == [
            {"_id": "e1", "label": "Trained", "changes": [{"key": "new"}]},
            {"_id": "e2"},
        ]


class TestJsonWorldStore:
    @pytest.mark.asyncio
    async def test_lists_records(self, world):
        store = JsonWorldStore(str(world))
        actors = await store.list_actors()
        scenes = await store.list_scenes()
        assert [a.id for a in actors] == ["a1"]
        assert actors[0].system.attributes["insight"].skills["tinker"].value == "5"
        assert [s.id for s in scenes] == ["s1"]
        assert len(scenes[0].tokens) == 3

    @pytest.mark.asyncio
    async def test_invalid_and_unreadable_files_are_skipped(self, world):
        _write(world / "actors" / "bad.json", {"_id": "bad", "type": "character", "effects": "nope"})
        (world / "actors" / "broken.json").write_text("{not json", encoding="utf-8")
        store = JsonWorldStore(str(world))
        assert [a.id for a in await store.list_actors()] == ["a1"]

    @pytest.mark.asyncio
    async def test_id_defaults_to_file_name(self, world):
        _write(world / "scenes" / "harbor.json", {"name": "Harbor", "tokens": []})
        store = JsonWorldStore(str(world))
        assert [s.id for s in await store.list_scenes()] == ["harbor", "s1"]

    @pytest.mark.asyncio
    async def test_update_writes_merged_document(self, world):
        store = JsonWorldStore(str(world))
        actor = await store.update_actor("a1", {"prototypeToken.actorLink": True}, enforce_types=False)
        assert actor.prototype_token.actor_link is True
        on_disk = json.loads((world / "actors" / "a1.json").read_text(encoding="utf-8"))
        assert on_disk["prototypeToken"] == {"actorLink": True, "name": "Vex"}

    @pytest.mark.asyncio
    async def test_enforced_update_rejects_legacy_types(self, world):
        store = JsonWorldStore(str(world))
        with pytest.raises(SchemaViolation) as exc:
            await store.update_actor("a1", {"name": "Vex"}, enforce_types=True)
        assert any("healing-clock" in e for e in exc.value.errors)
        # nothing written
        assert json.loads((world / "actors" / "a1.json").read_text(encoding="utf-8"))["system"]["healing-clock"] == "2"

    @pytest.mark.asyncio
    async def test_missing_record_raises(self, world):
        store = JsonWorldStore(str(world))
        with pytest.raises(RecordNotFound):
            await store.update_scene("nope", {"name": "x"})

    @pytest.mark.asyncio
    async def test_full_migration_against_files(self, world):
        settings = SettingsStore(str(world / "settings.json"))
        register_system_settings(settings)
        store = JsonWorldStore(str(world))

        report = await migrate_world(store, settings, LoggingNotifier(), "2.0.0")

        assert report.ok
        actor = json.loads((world / "actors" / "a1.json").read_text(encoding="utf-8"))
        attrs = actor["system"]["attributes"]
        assert set(attrs) == {"intuition", "body", "willpower"}
        assert attrs["intuition"]["skills"]["engineer"]["value"] == 5
        assert math.isnan(attrs["body"]["skills"]["fight"]["value"])
        assert actor["prototypeToken"]["actorLink"] is True
        scene = json.loads((world / "scenes" / "s1.json").read_text(encoding="utf-8"))
        assert all(t["actorLink"] and t["actorData"] == {} for t in scene["tokens"])

        reloaded = SettingsStore(str(world / "settings.json"))
        register_system_settings(reloaded)
        await reloaded.load()
        assert reloaded.get("rits", MIGRATION_SETTING) == "2.0.0"


class TestBackup:
    def test_backup_zips_world_records(self, world):
        (world / "notes.txt").write_text("not a record", encoding="utf-8")
        path, count = create_backup(str(world), "2.0.0")

        assert count == 2
        assert path.endswith("_2.0.0.zip")
        with zipfile.ZipFile(path) as zf:
            assert sorted(zf.namelist()) == ["actors/a1.json", "scenes/s1.json"]

    def test_backups_are_not_nested(self, world):
        first, _ = create_backup(str(world), "first")
        second, count = create_backup(str(world), "second")
        assert count == 2
        with zipfile.ZipFile(second) as zf:
            assert not any(n.startswith("backups/") for n in zf.namelist())
