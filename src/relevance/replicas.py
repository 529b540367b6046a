"""
Sort-by replicas.

Algolia sorts by an attribute through a replica index whose ranking starts
with asc(attr) or desc(attr). Replica names follow {index}_{attr}_{direction}.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from core.logging import get_logger
from relevance.algolia_client import IndexConfigClient
from relevance.models import SortOption, SortReplica, Task

logger = get_logger(__name__)

_SORT_CRITERION = re.compile(r"(asc|desc)\((.+)\)")

# Ranking criteria that follow the sort criterion on every replica
DEFAULT_RANKING = ["typo", "geo", "words", "filters", "proximity", "attribute", "exact", "custom"]

DIRECTION_LABELS = {
    "asc": "Low to High",
    "desc": "High to Low",
}

ATTRIBUTE_LABELS = {
    "price": "Price",
    "cost": "Cost",
    "amount": "Amount",
    "rating": "Rating",
    "score": "Score",
    "popularity": "Popularity",
    "views": "Views",
    "likes": "Likes",
    "sales": "Sales",
    "date": "Date",
    "created_at": "Date Created",
    "updated_at": "Date Updated",
    "published_at": "Date Published",
    "timestamp": "Date",
    "year": "Year",
    "month": "Month",
    "count": "Count",
    "quantity": "Quantity",
    "stock": "Stock",
    "reviews": "Reviews",
    "votes": "Votes",
}


def generate_attribute_label(attribute: str) -> str:
    """
    Human-readable label for a sort attribute.

    >>> generate_attribute_label("created_at")
    'Date Created'
    >>> generate_attribute_label("unit_price")
    'Price'
    >>> generate_attribute_label("releaseYear")
    'Release Year'
    """
    lower = attribute.lower()
    if lower in ATTRIBUTE_LABELS:
        return ATTRIBUTE_LABELS[lower]

    for key, label in ATTRIBUTE_LABELS.items():
        if key in lower:
            return label

    cleaned = re.sub(r"[_-]", " ", attribute)
    cleaned = re.sub(r"([a-z])([A-Z])", r"\1 \2", cleaned)
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), cleaned)


def replica_ranking(criterion: str) -> List[str]:
    """Full ranking for a replica sorted by `criterion` (e.g. "desc(price)")."""
    return [criterion, *DEFAULT_RANKING]


# =============================================================================
# Planning
# =============================================================================

@dataclass
class PlannedReplica:
    """One replica to create for a sort criterion."""
    name: str
    attribute: str
    direction: str

    @property
    def criterion(self) -> str:
        return f"{self.direction}({self.attribute})"

    @property
    def label(self) -> str:
        return f"{generate_attribute_label(self.attribute)}: {DIRECTION_LABELS[self.direction]}"


def plan_sort_replicas(index_name: str, sortable: List[str]) -> List[PlannedReplica]:
    """
    Expand sortable entries into replicas.

    A bare attribute yields an ascending and a descending replica;
    asc(x)/desc(x) yields a single replica. Anything else is skipped.
    """
    planned: List[PlannedReplica] = []
    seen = set()

    for entry in sortable:
        entry = entry.strip()
        match = _SORT_CRITERION.fullmatch(entry)

        if match:
            pairs = [(match.group(2), match.group(1))]
        elif entry and "(" not in entry and ")" not in entry and "," not in entry:
            pairs = [(entry, "asc"), (entry, "desc")]
        else:
            logger.warning("Skipping invalid sort format", entry=entry)
            continue

        for attribute, direction in pairs:
            name = f"{index_name}_{attribute}_{direction}"
            if name in seen:
                continue
            seen.add(name)
            planned.append(PlannedReplica(name=name, attribute=attribute, direction=direction))

    return planned


# =============================================================================
# Creation
# =============================================================================

@dataclass
class SortReplicaResult:
    sort_options: List[SortOption] = field(default_factory=list)
    tasks: List[Task] = field(default_factory=list)
    created: List[str] = field(default_factory=list)
    existing: List[str] = field(default_factory=list)


def create_sort_replicas(
    client: IndexConfigClient,
    index_name: str,
    sortable: List[str],
    wait: bool = True,
) -> SortReplicaResult:
    """
    Create and configure sort replicas for an index.

    New replica names are appended to the primary's existing replicas
    (existing ones are kept and not reconfigured). Each new replica gets a
    ranking led by its sort criterion.

    Args:
        client: Algolia client with write access.
        index_name: Primary index.
        sortable: Bare attributes and/or asc(x)/desc(x) criteria.
        wait: Wait for the primary's replica update before configuring replicas.

    Returns:
        SortReplicaResult with sort options (for every planned replica) and
        the tasks that were started.
    """
    result = SortReplicaResult()
    planned = plan_sort_replicas(index_name, sortable)
    if not planned:
        return result

    result.sort_options = [SortOption(label=p.label, value=p.name) for p in planned]

    current_replicas = client.get_settings(index_name).get("replicas") or []
    to_create = [p for p in planned if p.name not in current_replicas]
    result.existing = [p.name for p in planned if p.name in current_replicas]

    for name in result.existing:
        logger.info("Replica already exists", replica=name)

    if not to_create:
        return result

    resp = client.set_settings(
        index_name,
        {"replicas": [*current_replicas, *(p.name for p in to_create)]},
        forward_to_replicas=True,
    )
    result.tasks.append(Task(
        task_id=resp["taskID"],
        index_name=index_name,
        description="Creating replica indices",
    ))

    if wait:
        client.wait_for_task(index_name, resp["taskID"])

    for replica in to_create:
        resp = client.set_settings(replica.name, {"ranking": replica_ranking(replica.criterion)})
        result.tasks.append(Task(
            task_id=resp["taskID"],
            index_name=replica.name,
            description=(
                f"Configuring {generate_attribute_label(replica.attribute)} "
                f"({replica.direction}) sort"
            ),
        ))
        result.created.append(replica.name)

    logger.info("Created sort replicas", index=index_name, replicas=result.created)
    return result


# =============================================================================
# Parsing
# =============================================================================

def parse_sort_replicas(replica_names: List[str], index_name: Optional[str] = None) -> List[SortReplica]:
    """
    Describe replicas named {index}_{attribute}_{asc|desc}.

    When `index_name` is given, that prefix is removed; otherwise the first
    underscore-separated part is assumed to be the index name.
    """
    parsed: List[SortReplica] = []

    for replica in replica_names:
        if "_asc" not in replica and "_desc" not in replica:
            continue

        stem, _, direction = replica.rpartition("_")
        if direction not in DIRECTION_LABELS or not stem:
            continue

        prefix = f"{index_name}_" if index_name else None
        if prefix and stem.startswith(prefix):
            attribute = stem[len(prefix):]
        else:
            attribute = stem.partition("_")[2]

        if not attribute:
            continue

        parsed.append(SortReplica(attribute=attribute, direction=direction, replica=replica))

    return parsed
