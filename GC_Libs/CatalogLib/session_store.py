"""
Session file storage for Gear Cutout.

A session keeps the per-item editable fields (source image, tolerance,
erosion, outline, category and name) between runs, so a batch can be
reopened and re-exported with the same adjustments.

The session file schema includes:
- schema_version, created_at
- items: list of {source_path, tolerance, erosion, outline, category_id, item_name}

Functions:
    load_session_data: Load and normalize a session payload
    save_session_data: Write a session payload
    load_session: Rebuild an ItemStore from a session file
    save_session: Write an ItemStore to a session file
"""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from GC_Libs.constants import (
    DEFAULT_EROSION_ITERATIONS,
    DEFAULT_ITEM_NAME,
    DEFAULT_TOLERANCE,
    FIELD_CATEGORY_ID,
    FIELD_CREATED_AT,
    FIELD_EROSION,
    FIELD_ITEM_NAME,
    FIELD_ITEMS,
    FIELD_OUTLINE,
    FIELD_SCHEMA_VERSION,
    FIELD_SOURCE_PATH,
    FIELD_TOLERANCE,
    SCHEMA_VERSION,
)
from GC_Libs.CatalogLib.categories import DEFAULT_CATEGORY, find_category_by_id
from GC_Libs.CatalogLib.item_store import ItemStore
from GC_Libs.CutoutLib.cutout_models import InvalidParameterError, ProcessingParameters

logger = logging.getLogger(__name__)


def _normalize_item(entry: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Normalize one session entry; entries without a source path are dropped."""
    source_path = str(entry.get(FIELD_SOURCE_PATH) or "").strip()
    if not source_path:
        return None

    normalized: Dict[str, Any] = {FIELD_SOURCE_PATH: source_path}

    try:
        normalized[FIELD_TOLERANCE] = max(1, int(entry.get(FIELD_TOLERANCE, DEFAULT_TOLERANCE)))
    except (TypeError, ValueError):
        normalized[FIELD_TOLERANCE] = DEFAULT_TOLERANCE

    try:
        normalized[FIELD_EROSION] = max(0, int(entry.get(FIELD_EROSION, DEFAULT_EROSION_ITERATIONS)))
    except (TypeError, ValueError):
        normalized[FIELD_EROSION] = DEFAULT_EROSION_ITERATIONS

    normalized[FIELD_OUTLINE] = bool(entry.get(FIELD_OUTLINE, False))

    category = find_category_by_id(entry.get(FIELD_CATEGORY_ID)) or DEFAULT_CATEGORY
    normalized[FIELD_CATEGORY_ID] = category.id
    normalized[FIELD_ITEM_NAME] = str(entry.get(FIELD_ITEM_NAME) or DEFAULT_ITEM_NAME)
    return normalized


def load_session_data(session_path: Path) -> Dict[str, Any]:
    try:
        payload = json.loads(Path(session_path).read_text(encoding="utf-8"))
    except Exception:
        payload = {}

    if not isinstance(payload, dict):
        payload = {}

    items = payload.get(FIELD_ITEMS)
    normalized_items: List[Dict[str, Any]] = []
    if isinstance(items, list):
        for entry in items:
            if not isinstance(entry, dict):
                continue
            normalized = _normalize_item(entry)
            if normalized is not None:
                normalized_items.append(normalized)

    payload.setdefault(FIELD_SCHEMA_VERSION, SCHEMA_VERSION)
    payload.setdefault(FIELD_CREATED_AT, datetime.now().isoformat(timespec="seconds"))
    payload[FIELD_ITEMS] = normalized_items
    return payload


def save_session_data(session_path: Path, payload: Dict[str, Any]) -> None:
    payload[FIELD_SCHEMA_VERSION] = SCHEMA_VERSION
    payload.setdefault(FIELD_CREATED_AT, datetime.now().isoformat(timespec="seconds"))
    Path(session_path).write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")


def load_session(session_path: Path, base_params: Optional[ProcessingParameters] = None) -> ItemStore:
    """
    Rebuild an ItemStore from a session file.

    Args:
        session_path: Session file to read (missing or corrupt files give an empty store)
        base_params: Parameters for fields a session does not store
                     (modes, corner region, component thresholds)

    Returns:
        ItemStore with one item per session entry
    """
    base = (base_params or ProcessingParameters()).to_dict()
    store = ItemStore()

    for entry in load_session_data(session_path)[FIELD_ITEMS]:
        fields = dict(base)
        fields.update(
            tolerance=entry[FIELD_TOLERANCE],
            erosion_iterations=entry[FIELD_EROSION],
            outline=entry[FIELD_OUTLINE],
        )
        try:
            params = ProcessingParameters.from_dict(fields)
        except InvalidParameterError as e:
            logger.warning("Skipping session entry %s: %s", entry[FIELD_SOURCE_PATH], e)
            continue

        store.add(
            Path(entry[FIELD_SOURCE_PATH]),
            params=params,
            category_id=entry[FIELD_CATEGORY_ID],
            item_name=entry[FIELD_ITEM_NAME],
        )
    return store


def save_session(session_path: Path, store: ItemStore) -> Path:
    """Write every item's editable fields to *session_path*."""
    session_path = Path(session_path)
    existing = load_session_data(session_path) if session_path.exists() else {}

    payload: Dict[str, Any] = {
        FIELD_SCHEMA_VERSION: SCHEMA_VERSION,
        FIELD_CREATED_AT: existing.get(FIELD_CREATED_AT) or datetime.now().isoformat(timespec="seconds"),
        FIELD_ITEMS: [
            {
                FIELD_SOURCE_PATH: str(item.source_path),
                FIELD_TOLERANCE: item.params.tolerance,
                FIELD_EROSION: item.params.erosion_iterations,
                FIELD_OUTLINE: item.params.outline,
                FIELD_CATEGORY_ID: item.category_id,
                FIELD_ITEM_NAME: item.item_name,
            }
            for item in store.items()
        ],
    }
    session_path.parent.mkdir(parents=True, exist_ok=True)
    save_session_data(session_path, payload)
    return session_path
