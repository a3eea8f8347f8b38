"""Tests for sparse update payloads (Keep / Set / Delete)."""

import math

from models.update import DELETE, Set, is_empty, prune, to_update_data


class TestIsEmpty:
    def test_nested_empty_mappings_are_empty(self):
        assert is_empty({})
        assert is_empty({"system": {"attributes": {}}})

    def test_any_set_or_delete_leaf_is_not_empty(self):
        assert not is_empty({"system": {"attributes": {"x": Set(1)}}})
        assert not is_empty({"system": {"attributes": {"old": DELETE}}})


class TestToUpdateData:
    def test_delete_becomes_prefixed_key(self):
        data = to_update_data({"attributes": {"insight": DELETE, "intuition": {"label": Set("L")}}})
        assert data == {"attributes": {"-=insight": None, "intuition": {"label": "L"}}}

    def test_set_values_are_copied(self):
        value = {"a": [1, 2]}
        data = to_update_data({"x": Set(value)})
        data["x"]["a"].append(3)
        assert value == {"a": [1, 2]}


class TestPrune:
    def test_unchanged_values_are_dropped(self):
        doc = {"system": {"healing-clock": 2, "attributes": {"body": {"label": "RITS.Body"}}}}
        payload = {"system": {"healing-clock": Set(2), "attributes": {"body": {"label": Set("RITS.Body")}}}}
        assert prune(payload, doc) == {}

    def test_type_changes_are_kept(self):
        doc = {"value": "5"}
        assert prune({"value": Set(5)}, doc) == {"value": Set(5)}

    def test_delete_of_missing_key_is_dropped(self):
        assert prune({"attributes": {"insight": DELETE}}, {"attributes": {}}) == {}
        assert prune({"attributes": {"insight": DELETE}}, {"attributes": {"insight": {}}}) == {
            "attributes": {"insight": DELETE}
        }

    def test_nan_matches_stored_nan(self):
        nan = float("nan")
        assert prune({"value": Set(nan)}, {"value": nan}) == {}
        kept = prune({"value": Set(nan)}, {"value": "abc"})
        assert math.isnan(kept["value"].value)

    def test_mapping_with_fewer_keys_is_a_change(self):
        doc = {"tokens": [{"_id": "t0", "actorLink": True, "actorData": {"name": "Override"}}]}
        payload = {"tokens": Set([{"_id": "t0", "actorLink": True, "actorData": {}}])}
        assert prune(payload, doc) == payload
        assert prune({"data": Set({"a": 1})}, {"data": {"a": 1, "b": 2}}) == {"data": Set({"a": 1})}
        assert prune({"data": Set({"a": 1})}, {"data": {"a": 1}}) == {}

    def test_effect_items_compare_as_contained(self):
        doc = {"effects": [{"_id": "e1", "label": "Trained", "changes": [{"key": "k", "mode": 2, "value": 1}]}]}
        payload = {"effects": Set([{"_id": "e1", "changes": [{"key": "k", "mode": 2, "value": 1}]}])}
        assert prune(payload, doc) == {}
