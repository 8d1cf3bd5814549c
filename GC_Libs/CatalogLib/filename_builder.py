"""
Output filename derivation for catalog items.

A catalog filename is ``{category_id}[_overlap]_{item_name}``. Accessory
categories carry the ``_overlap`` marker so the catalog layers them above
other gear.

Functions:
    sanitize_item_name: Strip path-unsafe characters from a free-text name
    generate_full_filename: Compose the catalog filename stem
    output_filenames: File names of the full output and its thumbnail
"""

from typing import Optional, Tuple

from GC_Libs.constants import (
    ACCESSORY_MARKER,
    ACCESSORY_SUFFIX,
    DEFAULT_ITEM_NAME,
    OUTPUT_EXTENSION,
    THUMBNAIL_SUFFIX,
    UNSAFE_FILENAME_CHARS,
)


def sanitize_item_name(item_name: Optional[str]) -> str:
    """
    Remove characters that are unsafe in file names.

    An empty name falls back to the default item name.
    """
    text = str(item_name or DEFAULT_ITEM_NAME)
    return "".join(c for c in text if c not in UNSAFE_FILENAME_CHARS).strip()


def is_accessory(category_id: str) -> bool:
    return ACCESSORY_MARKER in str(category_id)


def generate_full_filename(category_id: str, item_name: Optional[str]) -> str:
    """
    Compose the catalog filename stem for an item.

    Args:
        category_id: Category id (e.g. "4_2_ドレス")
        item_name: Free-text item name

    Returns:
        Filename stem without extension

    Example:
        >>> generate_full_filename("12_10_アクセサリー", "星の/ピアス")
        '12_10_アクセサリー_overlap_星のピアス'
    """
    suffix = ACCESSORY_SUFFIX if is_accessory(category_id) else ""
    return f"{category_id}{suffix}_{sanitize_item_name(item_name)}"


def output_filenames(name: str) -> Tuple[str, str]:
    """Return (full_output_filename, thumbnail_filename) for a filename stem."""
    return f"{name}{OUTPUT_EXTENSION}", f"{name}{THUMBNAIL_SUFFIX}{OUTPUT_EXTENSION}"
