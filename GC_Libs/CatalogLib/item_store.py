"""
In-memory store of gear items being prepared for the catalog.

Every parameter edit bumps an item's version. A cutout run records the
version it started from and may only publish its outputs while that version
is still current, so a slow run with stale parameters never overwrites the
result of a newer one.

Classes:
    GearItem: One source image with its parameters, naming and outputs
    ItemStore: Thread-safe collection of GearItems
"""

import logging
import threading
import uuid
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from GC_Libs.constants import DEFAULT_ITEM_NAME
from GC_Libs.CatalogLib.categories import DEFAULT_CATEGORY
from GC_Libs.CatalogLib.filename_builder import generate_full_filename
from GC_Libs.CutoutLib.cutout_models import OutputPair, ProcessingParameters

logger = logging.getLogger(__name__)


@dataclass
class GearItem:
    """A single catalog item.

    Attributes:
        source_path: Image file the item was created from
        params: Current processing parameters
        category_id: Catalog category id
        item_name: Free-text item name
        item_id: Unique identifier
        outputs: Latest published OutputPair (None until processed)
        version: Parameter version, bumped on every edit
        error: Failure message of the latest run, if it failed
    """
    source_path: Path
    params: ProcessingParameters = field(default_factory=ProcessingParameters)
    category_id: str = DEFAULT_CATEGORY.id
    item_name: str = DEFAULT_ITEM_NAME
    item_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    outputs: Optional[OutputPair] = None
    version: int = 0
    error: Optional[str] = None

    @property
    def name(self) -> str:
        """Catalog filename stem derived from category and item name."""
        return generate_full_filename(self.category_id, self.item_name)

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def ready(self) -> bool:
        return self.outputs is not None and self.error is None


class ItemStore:
    """Thread-safe, insertion-ordered collection of GearItems."""

    def __init__(self):
        self._items: Dict[str, GearItem] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def add(
        self,
        source_path: Path,
        params: Optional[ProcessingParameters] = None,
        category_id: str = DEFAULT_CATEGORY.id,
        item_name: str = DEFAULT_ITEM_NAME,
    ) -> GearItem:
        item = GearItem(
            source_path=Path(source_path),
            params=params or ProcessingParameters(),
            category_id=category_id,
            item_name=item_name,
        )
        with self._lock:
            self._items[item.item_id] = item
        return item

    def get(self, item_id: str) -> GearItem:
        """
        Raises:
            KeyError: If no item has this id
        """
        with self._lock:
            if item_id not in self._items:
                raise KeyError(f"No item with id: {item_id}")
            return self._items[item_id]

    def items(self) -> List[GearItem]:
        with self._lock:
            return list(self._items.values())

    def remove(self, item_id: str) -> bool:
        with self._lock:
            return self._items.pop(item_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()

    def snapshot(self, item_id: str) -> Tuple[Path, ProcessingParameters, int]:
        """Return (source_path, params, version) for starting a run."""
        with self._lock:
            item = self._items[item_id]
            return item.source_path, item.params, item.version

    def update_parameters(self, item_id: str, **changes: Any) -> int:
        """
        Change processing parameters and bump the item's version.

        Args:
            item_id: Item to update
            **changes: ProcessingParameters fields to replace

        Returns:
            The new version

        Raises:
            KeyError: If no item has this id
            InvalidParameterError: If the new parameters are invalid
        """
        with self._lock:
            item = self._items[item_id]
            item.params = replace(item.params, **changes)
            item.version += 1
            return item.version

    def publish_outputs(self, item_id: str, version: int, outputs: OutputPair) -> bool:
        """
        Store outputs of a run started at *version*.

        Returns:
            True if stored; False if the item is gone or has a newer version
        """
        with self._lock:
            item = self._items.get(item_id)
            if item is None or version != item.version:
                logger.debug("Discarding stale outputs for %s (run v%d)", item_id, version)
                return False
            item.outputs = outputs
            item.error = None
            return True

    def mark_failed(self, item_id: str, version: int, message: str) -> bool:
        """Record a failed run, with the same staleness rule as publish_outputs."""
        with self._lock:
            item = self._items.get(item_id)
            if item is None or version != item.version:
                return False
            item.outputs = None
            item.error = str(message)
            return True

    def set_name(self, item_id: str, category_id: str, item_name: str) -> GearItem:
        with self._lock:
            item = self._items[item_id]
            item.category_id = category_id
            item.item_name = item_name
            return item
