"""
Gear catalog categories.

Category ids double as filename prefixes in the downstream catalog, so they
must not change.
"""

from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Category:
    id: str
    label: str


CATEGORIES: List[Category] = [
    Category("1_4_インナー", "インナー"),
    Category("2_7_くつ", "くつ"),
    Category("3_6_ボトムス", "ボトムス"),
    Category("4_2_ドレス", "ドレス"),
    Category("5_5_トップス", "トップス"),
    Category("10_1_かお", "かお"),
    Category("11_9_ぼうし", "ぼうし"),
    Category("12_10_アクセサリー", "アクセサリー"),
    Category("13_11_エフェクト", "エフェクト"),
]

DEFAULT_CATEGORY = CATEGORIES[3]


def category_labels() -> List[str]:
    return [category.label for category in CATEGORIES]


def find_category_by_label(label: Optional[str]) -> Optional[Category]:
    for category in CATEGORIES:
        if category.label == label:
            return category
    return None


def find_category_by_id(category_id: Optional[str]) -> Optional[Category]:
    for category in CATEGORIES:
        if category.id == category_id:
            return category
    return None
