"""
Hierarchical facet detection.

A hierarchical facet is an object attribute whose values spell out category
paths with a chevron separator, e.g.

    "categories": {"lvl0": "products", "lvl1": "products > fruits"}

Key names inside the object can be anything; only the values matter. The
separator must be " > " with surrounding spaces, so comparisons like "5>3"
are not mistaken for hierarchy levels.
"""

from typing import Any, Dict, List

HIERARCHY_SEPARATOR = " > "


def _has_separator(value: Any) -> bool:
    if isinstance(value, str):
        return HIERARCHY_SEPARATOR in value

    if isinstance(value, list):
        return any(
            isinstance(item, str) and HIERARCHY_SEPARATOR in item
            for item in value
        )

    return False


def detect_hierarchical_facets(records: List[Dict[str, Any]]) -> List[str]:
    """
    Return the top-level attributes that hold hierarchical facet objects.

    An attribute qualifies if, in any record, its value is an object with at
    least one property that is a string (or a list containing a string) with
    the " > " separator. Results are the union across all records,
    deduplicated, in first-seen order.

    >>> detect_hierarchical_facets([
    ...     {"categories": {"lvl0": "products", "lvl1": "products > fruits"}},
    ... ])
    ['categories']
    """
    # dict preserves insertion order and dedupes
    found: Dict[str, None] = {}

    for record in records:
        for key, value in record.items():
            if key in found or not isinstance(value, dict):
                continue

            if any(_has_separator(v) for v in value.values()):
                found[key] = None

    return list(found)
