"""
CatalogLib - Catalog naming, persistence and batch processing

This module handles everything around the cutout pipeline: category and
filename rules, the naming service client, settings and session files,
the item store and the batch runner.
"""

from GC_Libs.CatalogLib.categories import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    Category,
    find_category_by_id,
    find_category_by_label,
)
from GC_Libs.CatalogLib.filename_builder import (
    generate_full_filename,
    output_filenames,
    sanitize_item_name,
)
from GC_Libs.CatalogLib.settings_store import load_api_key, save_api_key
from GC_Libs.CatalogLib.naming_service import (
    NamingResult,
    NamingService,
    NamingServiceError,
)
from GC_Libs.CatalogLib.item_store import GearItem, ItemStore
from GC_Libs.CatalogLib.batch_runner import (
    export_items,
    name_items,
    process_items,
    reprocess_item,
    run_item,
)
from GC_Libs.CatalogLib.session_store import load_session, save_session

__all__ = [
    "CATEGORIES",
    "DEFAULT_CATEGORY",
    "Category",
    "find_category_by_id",
    "find_category_by_label",
    "generate_full_filename",
    "output_filenames",
    "sanitize_item_name",
    "load_api_key",
    "save_api_key",
    "NamingResult",
    "NamingService",
    "NamingServiceError",
    "GearItem",
    "ItemStore",
    "export_items",
    "name_items",
    "process_items",
    "reprocess_item",
    "run_item",
    "load_session",
    "save_session",
]
