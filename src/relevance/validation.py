"""
Attribute validation for model-suggested index settings.

Models occasionally suggest attribute names that do not exist in the
records they were shown. These helpers check every suggestion against the
keys actually present in the sample and drop the ones that don't match.
Dropping is logged, never raised: callers always get a best-effort list.
"""

import re
from typing import Any, Dict, Iterable, List, Set

from core.logging import get_logger

logger = get_logger(__name__)


# Wrappers Algolia accepts around an attribute name in index settings
_MODIFIER_PATTERN = re.compile(
    r"(asc|desc|ordered|unordered|searchable|filterOnly)\((.+)\)"
)


def get_base_attribute(attribute: str) -> str:
    """
    Strip a known modifier wrapper from an attribute expression.

    "desc(price)" -> "price", "searchable(brand)" -> "brand".
    Anything that doesn't match a known wrapper is returned unchanged.
    """
    match = _MODIFIER_PATTERN.fullmatch(attribute)
    return match.group(2) if match else attribute


def collect_attribute_names(records: Iterable[Dict[str, Any]]) -> Set[str]:
    """
    Collect every attribute name present in the records.

    Includes top-level keys plus "parent.child" paths for values that are
    nested objects (one level deep; lists are not descended into).
    """
    names: Set[str] = set()

    for record in records:
        for key, value in record.items():
            names.add(key)

            if isinstance(value, dict):
                for sub_key in value:
                    names.add(f"{key}.{sub_key}")

    return names


def validate_attributes(
    attributes: List[str],
    records: List[Dict[str, Any]],
    setting: str,
) -> List[str]:
    """
    Filter suggested attributes down to those that exist in the records.

    Args:
        attributes: Suggested attribute expressions, possibly wrapped in a
            modifier (e.g. "desc(rating)") or comma-joined for equal-weight
            searchable attributes (e.g. "title,subtitle").
        records: Sample records used as ground truth.
        setting: Label of the setting being validated, used in logs only.

    Returns:
        The surviving entries, in their original order and original form.
        Empty when no records are given.
    """
    if not records:
        return []

    known = collect_attribute_names(records)

    valid: List[str] = []
    for attribute in attributes:
        base = get_base_attribute(attribute)
        # Searchable attributes may be comma-separated; every part must exist
        parts = base.split(",")

        if all(part in known for part in parts):
            valid.append(attribute)
        else:
            logger.warning(
                "Filtered out non-existent attribute",
                setting=setting,
                attribute=attribute,
                base=base,
            )

    return valid
