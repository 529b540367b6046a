"""
LLM-backed generators for Algolia index settings.

Each generator:
1. Takes the first `limit` records as the sample
2. Asks the model for a structured suggestion (list + reasoning)
3. Drops suggested attributes that don't exist in the sample
4. Notes in the reasoning how many suggestions were dropped

Generators fail open: if the model call or parsing fails, a heuristic
fallback derived from the first sample record is returned instead.
"""

import time
from typing import Any, Callable, Dict, List, Optional, Type

from config.settings import get_settings
from core.logging import get_logger
from relevance.costs import CostTracker
from relevance.hierarchy import detect_hierarchical_facets
from relevance.llm import ModelClient
from relevance.models import (
    AttributeSuggestion,
    ConfigResult,
    ConfigurationType,
    CustomRankingSuggestion,
    FacetingSuggestion,
    SearchableAttributesSuggestion,
    SortableAttributesSuggestion,
)
from relevance.prompts import (
    CUSTOM_RANKING_PROMPT,
    FACETING_PROMPT,
    SEARCHABLE_ATTRIBUTES_PROMPT,
    SORTABLE_ATTRIBUTES_PROMPT,
    render_records,
)
from relevance.validation import get_base_attribute, validate_attributes

logger = get_logger(__name__)

Record = Dict[str, Any]

MAX_SORTABLE_ATTRIBUTES = 4

_RANKING_KEYWORDS = ("sales", "views", "likes", "rating", "popularity", "count", "score")
_FACET_KEYWORDS = ("category", "brand", "type", "genre", "color", "size", "status", "author", "designer")
_SORT_KEYWORDS = (
    "price", "cost", "date", "rating", "score", "views",
    "likes", "sales", "count", "timestamp",
)


# =============================================================================
# Shared Steps
# =============================================================================

def _request_suggestion(
    model_client: ModelClient,
    prompt_template: str,
    sample: List[Record],
    schema: Type[AttributeSuggestion],
    cost_tracker: Optional[CostTracker],
) -> AttributeSuggestion:
    settings = get_settings()
    t_start = time.time()

    suggestion, usage = model_client.generate_object(
        prompt_template.format(records=render_records(sample)),
        schema,
        max_tokens=settings.generation_max_tokens,
        temperature=settings.generation_temperature,
    )

    if cost_tracker is not None:
        cost_tracker.add(model_client.model_name, usage)

    logger.info(
        "Generated configuration suggestion",
        setting=schema.setting.value,
        model=model_client.model_name,
        suggested=len(suggestion.suggested()),
        latency_ms=int((time.time() - t_start) * 1000),
    )
    return suggestion


def _validated_result(
    suggestion: AttributeSuggestion,
    sample: List[Record],
    label: str,
    limit: Optional[int] = None,
) -> ConfigResult:
    suggested = suggestion.suggested()
    data = validate_attributes(suggested, sample, label)

    reasoning = suggestion.reasoning
    filtered_count = len(suggested) - len(data)
    if filtered_count > 0:
        reasoning += f" Filtered out {filtered_count} non-existent attribute(s) from AI suggestions."

    if limit is not None:
        data = data[:limit]

    # Reasons may name the bare attribute or the wrapped expression
    kept = {get_base_attribute(attr) for attr in data}
    return ConfigResult(
        setting=suggestion.setting,
        data=data,
        reasoning=reasoning,
        attribute_reasons=[
            r for r in suggestion.attribute_reasons if get_base_attribute(r.attribute) in kept
        ],
    )


def _keys_matching(record: Record, predicate: Callable[[str, Any], bool], limit: int) -> List[str]:
    return [key for key, value in record.items() if predicate(key, value)][:limit]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# =============================================================================
# Searchable Attributes
# =============================================================================

def _fallback_searchable(first: Record) -> List[str]:
    def qualifies(key: str, value: Any) -> bool:
        lower = key.lower()
        return (
            not key.startswith("_")
            and key != "objectID"
            and "url" not in lower
            and "id" not in lower
            and isinstance(value, str)
        )

    return [key for key, value in first.items() if qualifies(key, value)]


def generate_searchable_attributes(
    records: List[Record],
    model_client: ModelClient,
    limit: int = 10,
    cost_tracker: Optional[CostTracker] = None,
) -> ConfigResult:
    """Suggest searchableAttributes, most important first."""
    sample = records[:limit]

    try:
        suggestion = _request_suggestion(
            model_client, SEARCHABLE_ATTRIBUTES_PROMPT, sample,
            SearchableAttributesSuggestion, cost_tracker,
        )
        return _validated_result(suggestion, sample, "Searchable attributes")
    except Exception as e:
        logger.error("Searchable attributes generation failed, using fallback", error=str(e))

    return ConfigResult(
        setting=ConfigurationType.SEARCHABLE_ATTRIBUTES,
        data=_fallback_searchable(sample[0] if sample else {}),
        reasoning="Fallback: Selected string attributes excluding URLs and IDs",
        fallback=True,
    )


# =============================================================================
# Custom Ranking
# =============================================================================

def _fallback_custom_ranking(first: Record) -> List[str]:
    def qualifies(key: str, value: Any) -> bool:
        lower = key.lower()
        return (
            (_is_number(value) or isinstance(value, bool))
            and any(word in lower for word in _RANKING_KEYWORDS)
        )

    return [f"desc({key})" for key in _keys_matching(first, qualifies, 3)]


def generate_custom_ranking(
    records: List[Record],
    model_client: ModelClient,
    limit: int = 10,
    cost_tracker: Optional[CostTracker] = None,
) -> ConfigResult:
    """Suggest customRanking criteria as asc(x)/desc(x), most decisive first."""
    sample = records[:limit]

    try:
        suggestion = _request_suggestion(
            model_client, CUSTOM_RANKING_PROMPT, sample,
            CustomRankingSuggestion, cost_tracker,
        )
        return _validated_result(suggestion, sample, "Custom ranking")
    except Exception as e:
        logger.error("Custom ranking generation failed, using fallback", error=str(e))

    return ConfigResult(
        setting=ConfigurationType.CUSTOM_RANKING,
        data=_fallback_custom_ranking(sample[0] if sample else {}),
        reasoning="Fallback: Selected numeric attributes with ranking-related names",
        fallback=True,
    )


# =============================================================================
# Attributes for Faceting
# =============================================================================

def _fallback_faceting(first: Record, hierarchical: List[str]) -> List[str]:
    def qualifies(key: str, value: Any) -> bool:
        if key in hierarchical or value is None:
            return False
        lower = key.lower()
        is_facet_name = any(word in lower for word in _FACET_KEYWORDS)
        not_excluded = (
            "id" not in lower
            and "url" not in lower
            and "description" not in lower
            and not key.startswith("_")
        )
        return isinstance(value, (str, bool)) and (is_facet_name or not_excluded)

    return _keys_matching(first, qualifies, 5)


def _with_hierarchy_note(reasoning: str, hierarchical: List[str]) -> str:
    if not hierarchical:
        return reasoning
    return f"{reasoning} Additionally, detected hierarchical facets: {', '.join(hierarchical)}."


def generate_attributes_for_faceting(
    records: List[Record],
    model_client: ModelClient,
    limit: int = 10,
    cost_tracker: Optional[CostTracker] = None,
) -> ConfigResult:
    """
    Suggest attributesForFaceting.

    Hierarchical facet objects are detected in code and hidden from the
    model; they are prepended to whatever the model suggests for the rest.
    """
    sample = records[:limit]
    hierarchical = detect_hierarchical_facets(sample)

    stripped = [
        {key: value for key, value in record.items() if key not in hierarchical}
        for record in sample
    ]

    try:
        suggestion = _request_suggestion(
            model_client, FACETING_PROMPT, stripped,
            FacetingSuggestion, cost_tracker,
        )
        result = _validated_result(suggestion, stripped, "Attributes for faceting")
        return result.model_copy(update={
            "data": [*hierarchical, *result.data],
            "reasoning": _with_hierarchy_note(result.reasoning, hierarchical),
        })
    except Exception as e:
        logger.error("Faceting generation failed, using fallback", error=str(e))

    reasoning = "Fallback: Selected string/boolean attributes with faceting-related names"
    if hierarchical:
        reasoning += f". Additionally detected hierarchical facets: {', '.join(hierarchical)}"

    return ConfigResult(
        setting=ConfigurationType.ATTRIBUTES_FOR_FACETING,
        data=[*hierarchical, *_fallback_faceting(sample[0] if sample else {}, hierarchical)],
        reasoning=reasoning,
        fallback=True,
    )


# =============================================================================
# Sort-by Replicas
# =============================================================================

def _fallback_sortable(first: Record) -> List[str]:
    def qualifies(key: str, value: Any) -> bool:
        lower = key.lower()
        return _is_number(value) and any(word in lower for word in _SORT_KEYWORDS)

    return _keys_matching(first, qualifies, 3)


def generate_sort_by_replicas(
    records: List[Record],
    model_client: ModelClient,
    limit: int = 10,
    cost_tracker: Optional[CostTracker] = None,
) -> ConfigResult:
    """Suggest up to four bare attribute names to expose as sort-by replicas."""
    sample = records[:limit]

    try:
        suggestion = _request_suggestion(
            model_client, SORTABLE_ATTRIBUTES_PROMPT, sample,
            SortableAttributesSuggestion, cost_tracker,
        )
        return _validated_result(
            suggestion, sample, "Sortable attributes", limit=MAX_SORTABLE_ATTRIBUTES,
        )
    except Exception as e:
        logger.error("Sortable attributes generation failed, using fallback", error=str(e))

    return ConfigResult(
        setting=ConfigurationType.SORTABLE_ATTRIBUTES,
        data=_fallback_sortable(sample[0] if sample else {}),
        reasoning="Fallback: Selected numeric attributes with sorting-related names",
        fallback=True,
    )


GENERATORS: Dict[ConfigurationType, Callable[..., ConfigResult]] = {
    ConfigurationType.SEARCHABLE_ATTRIBUTES: generate_searchable_attributes,
    ConfigurationType.CUSTOM_RANKING: generate_custom_ranking,
    ConfigurationType.ATTRIBUTES_FOR_FACETING: generate_attributes_for_faceting,
    ConfigurationType.SORTABLE_ATTRIBUTES: generate_sort_by_replicas,
}
