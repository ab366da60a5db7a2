"""
Tests for the local override stores and merging overrides into records.
"""

import json
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from portal.overrides.store import OverrideStore
from portal.overrides.merge import MergePolicy, merge_record, apply_overrides
from portal.overrides.registry import OverrideRegistry


@pytest.fixture
def store(tmp_path) -> OverrideStore:
    return OverrideStore(str(tmp_path / "order_status.json"))


class TestOverrideStore:

    def test_get_missing_returns_none(self, store: OverrideStore):
        assert store.get_override("unknown") is None
        assert "unknown" not in store
        assert len(store) == 0

    def test_set_then_get(self, store: OverrideStore):
        store.set_override("order-1", "Editing")
        assert store.get_override("order-1") == "Editing"
        assert "order-1" in store

    def test_last_write_wins(self, store: OverrideStore):
        """The most recent value replaces earlier ones."""
        store.set_override("order-1", "Scheduled")
        store.set_override("order-1", "In Progress")
        store.set_override("order-1", "Delivered")

        assert store.get_override("order-1") == "Delivered"
        assert len(store) == 1

    def test_repeated_identical_set_is_idempotent(self, store: OverrideStore):
        store.set_override("order-1", "Editing")
        store.set_override("order-1", "Editing")

        assert store.get_override("order-1") == "Editing"
        assert len(store) == 1
        reopened = OverrideStore(store.path)
        assert reopened.get_override("order-1") == "Editing"
        assert len(reopened) == 1

    def test_uuid_and_string_ids_are_the_same_key(self, store: OverrideStore):
        order_id = uuid.uuid4()
        store.set_override(order_id, "Editing")
        assert store.get_override(str(order_id)) == "Editing"

    def test_values_survive_a_new_instance(self, tmp_path):
        """A store opened later on the same file sees earlier writes."""
        path = str(tmp_path / "payment_status.json")
        OverrideStore(path).set_override("order-1", "paid")

        reopened = OverrideStore(path)
        assert reopened.get_override("order-1") == "paid"
        assert reopened.namespace == "payment_status"

    def test_structured_values(self, store: OverrideStore):
        assets = [{"id": "a1", "url": "https://media.example.com/a1.zip"}]
        store.set_override("order-1", assets)
        assert store.get_override("order-1") == assets

    def test_entry_records_update_time(self, store: OverrideStore):
        before = datetime.now(timezone.utc)
        entry = store.set_override("order-1", "Editing")
        assert entry.updated_at >= before
        assert store.get_entry("order-1") == entry

    def test_unserializable_value_keeps_previous(self, store: OverrideStore):
        store.set_override("order-1", "Scheduled")

        with pytest.raises(TypeError):
            store.set_override("order-1", object())

        assert store.get_override("order-1") == "Scheduled"
        assert OverrideStore(store.path).get_override("order-1") == "Scheduled"

    def test_corrupt_file_starts_empty(self, tmp_path):
        path = tmp_path / "order_assets.json"
        path.write_text("{not json", encoding="utf-8")

        store = OverrideStore(str(path))
        assert len(store) == 0

        store.set_override("order-1", [])
        assert json.loads(path.read_text(encoding="utf-8"))["order-1"]["value"] == []

    def test_non_object_file_starts_empty(self, tmp_path):
        path = tmp_path / "order_status.json"
        path.write_text("[]", encoding="utf-8")

        store = OverrideStore(str(path))
        assert len(store) == 0
        assert store.get_override("order-1") is None

        store.set_override("order-1", "Editing")
        assert OverrideStore(str(path)).get_override("order-1") == "Editing"

    def test_malformed_entry_is_skipped(self, tmp_path):
        path = tmp_path / "order_status.json"
        path.write_text(json.dumps({
            "good": {"value": "Editing", "updated_at": "2024-05-01T10:00:00+00:00"},
            "bad": {"value": "Delivered"},
        }), encoding="utf-8")

        store = OverrideStore(str(path))
        assert store.get_override("good") == "Editing"
        assert store.get_override("bad") is None

    def test_snapshot_and_reload(self, store: OverrideStore):
        store.set_override("a", 1)
        store.set_override("b", 2)
        assert store.snapshot() == {"a": 1, "b": 2}

        store._entries.clear()
        store.reload()
        assert store.snapshot() == {"a": 1, "b": 2}


class TestMergeRecord:

    def test_record_without_override_is_unchanged(self, store: OverrideStore):
        record = {"id": "order-1", "status": "Scheduled"}
        merged = merge_record(record, "status", store)
        assert merged == record
        assert merged is not record

    def test_override_wins(self, store: OverrideStore):
        store.set_override("order-1", "Delivered")
        record = {"id": "order-1", "status": "Scheduled", "notes": "gate code 1234"}

        merged = merge_record(record, "status", store)

        assert merged["status"] == "Delivered"
        assert merged["notes"] == "gate code 1234"
        assert record["status"] == "Scheduled"

    def test_prefer_newer_keeps_newer_record(self, store: OverrideStore):
        store.set_override("order-1", "Editing")
        newer = (datetime.now(timezone.utc) + timedelta(minutes=5)).isoformat()
        record = {"id": "order-1", "status": "Delivered", "updated_at": newer}

        merged = merge_record(record, "status", store, policy=MergePolicy.PREFER_NEWER)
        assert merged["status"] == "Delivered"

    def test_prefer_newer_applies_newer_override(self, store: OverrideStore):
        store.set_override("order-1", "Editing")
        record = {"id": "order-1", "status": "Scheduled", "updated_at": "2020-01-01T00:00:00"}

        merged = merge_record(record, "status", store, policy=MergePolicy.PREFER_NEWER)
        assert merged["status"] == "Editing"

    def test_prefer_newer_without_timestamp_uses_override(self, store: OverrideStore):
        store.set_override("order-1", "Editing")
        merged = merge_record({"id": "order-1", "status": "Draft"}, "status", store, policy=MergePolicy.PREFER_NEWER)
        assert merged["status"] == "Editing"

    def test_apply_overrides_keeps_order(self, store: OverrideStore):
        store.set_override("b", "Delivered")
        records = [{"id": "a", "status": "Draft"}, {"id": "b", "status": "Scheduled"}]

        merged = apply_overrides(records, "status", store)

        assert [r["id"] for r in merged] == ["a", "b"]
        assert [r["status"] for r in merged] == ["Draft", "Delivered"]


class TestOverrideRegistry:

    def test_merge_order_applies_every_namespace(self, tmp_path):
        registry = OverrideRegistry(str(tmp_path))
        registry.order_status.set_override("order-1", "Delivered")
        registry.payment_status.set_override("order-1", "paid")
        registry.order_assets.set_override("order-1", [{"id": "d1"}])

        merged = registry.merge_order({
            "id": "order-1",
            "status": "Editing",
            "payment_status": "pending",
            "deliverables": [],
        })

        assert merged["status"] == "Delivered"
        assert merged["payment_status"] == "paid"
        assert merged["deliverables"] == [{"id": "d1"}]

    def test_stats(self, tmp_path):
        registry = OverrideRegistry(str(tmp_path), MergePolicy.PREFER_NEWER)
        registry.order_status.set_override("order-1", "Editing")

        stats = registry.stats()
        assert stats["policy"] == "prefer_newer"
        assert stats["entries"] == {"order_status": 1, "payment_status": 0, "order_assets": 0}

    def test_reload_picks_up_writes_from_another_registry(self, tmp_path):
        first = OverrideRegistry(str(tmp_path))
        second = OverrideRegistry(str(tmp_path))

        first.order_status.set_override("order-1", "Delivered")
        assert second.order_status.get_override("order-1") is None

        second.reload()
        assert second.order_status.get_override("order-1") == "Delivered"
