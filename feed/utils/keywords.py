"""
Keyword helpers: normalized tokens used to relate items to each other.
"""

import re
from typing import Set

from ..models.item import Item

_NAME_SEPARATORS = re.compile(r"[ \-_]")


def item_keywords(item: Item) -> Set[str]:
    """Lower-cased name tokens, category, brand and tag names; single characters dropped."""
    keywords = set(_NAME_SEPARATORS.split(item.name.lower()))
    keywords.add(item.category.lower())
    if item.brand:
        keywords.add(item.brand.lower())
    keywords.update(item.tag_names())
    return {k for k in keywords if len(k) > 1}
