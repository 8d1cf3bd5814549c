"""
Tests for the item store and its stale-result guard.
"""

import pytest
from PIL import Image

from GC_Libs.CatalogLib.item_store import GearItem, ItemStore
from GC_Libs.CutoutLib.cutout_models import (
    InvalidParameterError,
    OutputPair,
    ProcessingParameters,
)


def make_outputs():
    return OutputPair(full=Image.new("RGBA", (4, 4)), tight=Image.new("RGBA", (2, 2)))


class TestGearItem:
    """Tests for GearItem."""

    def test_defaults(self):
        item = GearItem(source_path="a.png")

        assert item.category_id == "4_2_ドレス"
        assert item.item_name == "装備"
        assert item.name == "4_2_ドレス_装備"
        assert not item.ready
        assert not item.failed

    def test_unique_ids(self):
        assert GearItem(source_path="a.png").item_id != GearItem(source_path="a.png").item_id


class TestItemStore:
    """Tests for ItemStore."""

    def test_add_and_get(self, tmp_path):
        store = ItemStore()
        item = store.add(tmp_path / "a.png")

        assert len(store) == 1
        assert store.get(item.item_id) is item
        assert store.items() == [item]

    def test_get_missing(self):
        with pytest.raises(KeyError):
            ItemStore().get("nope")

    def test_remove_and_clear(self, tmp_path):
        store = ItemStore()
        first = store.add(tmp_path / "a.png")
        store.add(tmp_path / "b.png")

        assert store.remove(first.item_id)
        assert not store.remove(first.item_id)
        assert len(store) == 1

        store.clear()
        assert len(store) == 0

    def test_update_bumps_version(self, tmp_path):
        store = ItemStore()
        item = store.add(tmp_path / "a.png")

        version = store.update_parameters(item.item_id, tolerance=80)

        assert version == 1
        assert store.get(item.item_id).params.tolerance == 80

    def test_invalid_update_keeps_item(self, tmp_path):
        store = ItemStore()
        item = store.add(tmp_path / "a.png", params=ProcessingParameters(tolerance=40))

        with pytest.raises(InvalidParameterError):
            store.update_parameters(item.item_id, tolerance=0)

        assert item.params.tolerance == 40
        assert item.version == 0

    def test_publish_current_version(self, tmp_path):
        store = ItemStore()
        item = store.add(tmp_path / "a.png")
        _, _, version = store.snapshot(item.item_id)

        assert store.publish_outputs(item.item_id, version, make_outputs())
        assert item.ready

    def test_stale_run_is_discarded(self, tmp_path):
        """A run started before an edit never overwrites the newer result."""
        store = ItemStore()
        item = store.add(tmp_path / "a.png")
        _, _, old_version = store.snapshot(item.item_id)

        new_version = store.update_parameters(item.item_id, erosion_iterations=2)
        newer = make_outputs()
        assert store.publish_outputs(item.item_id, new_version, newer)

        assert not store.publish_outputs(item.item_id, old_version, make_outputs())
        assert not store.mark_failed(item.item_id, old_version, "late failure")
        assert item.outputs is newer
        assert not item.failed

    def test_publish_after_remove(self, tmp_path):
        store = ItemStore()
        item = store.add(tmp_path / "a.png")
        store.remove(item.item_id)

        assert not store.publish_outputs(item.item_id, 0, make_outputs())

    def test_mark_failed_and_recover(self, tmp_path):
        store = ItemStore()
        item = store.add(tmp_path / "a.png")

        assert store.mark_failed(item.item_id, 0, "broken")
        assert item.failed
        assert item.error == "broken"

        store.publish_outputs(item.item_id, 0, make_outputs())
        assert item.ready
        assert item.error is None

    def test_set_name(self, tmp_path):
        store = ItemStore()
        item = store.add(tmp_path / "a.png")

        store.set_name(item.item_id, "12_10_アクセサリー", "星のピアス")

        assert item.name == "12_10_アクセサリー_overlap_星のピアス"
