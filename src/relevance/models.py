"""
Pydantic models shared by the generators, the CLI and the HTTP API.

Wire-facing models use camelCase aliases so that payloads line up with
Algolia's own setting names (searchableAttributes, customRanking, ...).
"""

from enum import Enum
from typing import Any, ClassVar, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for models serialized with camelCase keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Enums
# ============================================================================

class ConfigurationType(str, Enum):
    """Index settings the tool can generate."""
    SEARCHABLE_ATTRIBUTES = "searchableAttributes"
    CUSTOM_RANKING = "customRanking"
    ATTRIBUTES_FOR_FACETING = "attributesForFaceting"
    SORTABLE_ATTRIBUTES = "sortableAttributes"


SECTION_TITLES: Dict[ConfigurationType, str] = {
    ConfigurationType.SEARCHABLE_ATTRIBUTES: "🔍 Searchable Attributes",
    ConfigurationType.CUSTOM_RANKING: "📊 Custom Ranking",
    ConfigurationType.ATTRIBUTES_FOR_FACETING: "🏷️  Attributes for Faceting",
    ConfigurationType.SORTABLE_ATTRIBUTES: "🔀 Sortable Attributes",
}


# ============================================================================
# Usage
# ============================================================================

class TokenUsage(BaseModel):
    """Token counts reported by a provider for one or more calls."""
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )


# ============================================================================
# Model Output Schemas
# ============================================================================

class AttributeReason(CamelModel):
    attribute: str = Field(description="Attribute expression exactly as suggested")
    reason: str = Field(description="One-sentence justification for this attribute")


class AttributeSuggestion(CamelModel):
    """
    Structured answer expected from the model.

    Subclasses add one list field named after the Algolia setting.
    """

    setting: ClassVar[ConfigurationType]

    reasoning: str = Field(
        default="",
        description="Brief explanation of why these attributes were selected",
    )
    attribute_reasons: List[AttributeReason] = Field(
        default_factory=list,
        description="Per-attribute justification, one entry per suggested attribute",
    )

    def suggested(self) -> List[str]:
        raise NotImplementedError


class SearchableAttributesSuggestion(AttributeSuggestion):
    setting: ClassVar[ConfigurationType] = ConfigurationType.SEARCHABLE_ATTRIBUTES

    searchable_attributes: List[str] = Field(
        default_factory=list,
        description="Array of attribute names that should be searchable, most important first",
    )

    def suggested(self) -> List[str]:
        return self.searchable_attributes


class CustomRankingSuggestion(AttributeSuggestion):
    setting: ClassVar[ConfigurationType] = ConfigurationType.CUSTOM_RANKING

    custom_ranking: List[str] = Field(
        default_factory=list,
        description='Array of custom ranking criteria in order of importance (e.g., "desc(sales)", "asc(price)")',
    )

    def suggested(self) -> List[str]:
        return self.custom_ranking


class FacetingSuggestion(AttributeSuggestion):
    setting: ClassVar[ConfigurationType] = ConfigurationType.ATTRIBUTES_FOR_FACETING

    attributes_for_faceting: List[str] = Field(
        default_factory=list,
        description='Array of faceting attributes (e.g., "category", "searchable(brand)", "filterOnly(status)")',
    )

    def suggested(self) -> List[str]:
        return self.attributes_for_faceting


class SortableAttributesSuggestion(AttributeSuggestion):
    setting: ClassVar[ConfigurationType] = ConfigurationType.SORTABLE_ATTRIBUTES

    sortable_attributes: List[str] = Field(
        default_factory=list,
        description='Array of attribute names suitable for sorting (e.g., "price", "date", "rating")',
    )

    def suggested(self) -> List[str]:
        return self.sortable_attributes


# ============================================================================
# Generator Results
# ============================================================================

class ConfigResult(CamelModel):
    """Final, validated suggestion for one setting."""
    setting: ConfigurationType
    data: List[str] = Field(default_factory=list)
    reasoning: str = ""
    attribute_reasons: List[AttributeReason] = Field(default_factory=list)
    fallback: bool = False

    def reason_for(self, attribute: str) -> Optional[str]:
        """Look up the model's reason for an attribute, tolerating asc()/desc() wrapping."""
        reasons = {item.attribute: item.reason for item in self.attribute_reasons}
        if attribute in reasons:
            return reasons[attribute]

        base = _strip_sort_direction(attribute)
        if base in reasons:
            return reasons[base]

        for reason_attribute, reason in reasons.items():
            if _strip_sort_direction(reason_attribute) == base:
                return reason
        return None


def _strip_sort_direction(attribute: str) -> str:
    for prefix in ("asc(", "desc("):
        if attribute.startswith(prefix) and attribute.endswith(")"):
            return attribute[len(prefix):-1]
    return attribute


# ============================================================================
# API Requests
# ============================================================================

class AlgoliaCredentials(CamelModel):
    app_id: str = Field(..., min_length=1, description="Algolia App ID")
    write_api_key: str = Field(..., min_length=1, description="Algolia Admin API Key")


class GenerateSuggestionsRequest(CamelModel):
    index_name: str = Field(..., min_length=1, description="Index name")
    records: List[Dict[str, Any]] = Field(..., description="Sample records")
    limit: Optional[int] = Field(None, ge=1, description="Number of records to analyze")
    model: Optional[str] = Field(None, description="Model to use")


class CreateIndexRequest(AlgoliaCredentials):
    index_name: str = Field(..., min_length=1, description="Index name")
    records: List[Dict[str, Any]] = Field(..., min_length=1, description="Records to index")


class UpdateSettingsRequest(AlgoliaCredentials):
    searchable_attributes: Optional[List[str]] = None
    custom_ranking: Optional[List[str]] = None
    attributes_for_faceting: Optional[List[str]] = None


class ConfigurationFeedbackRequest(CamelModel):
    index_name: str = Field(..., min_length=1)
    app_id: str = Field(..., min_length=1)
    configuration_type: ConfigurationType
    feedback: Literal["upvote", "downvote"]
    explanation: Optional[str] = None
    generated_config: List[str]


# ============================================================================
# Tasks
# ============================================================================

class Task(CamelModel):
    task_id: int = Field(..., alias="taskID")
    index_name: str
    description: str


class TaskWithStatus(Task):
    status: Optional[str] = None


class TasksRequest(AlgoliaCredentials):
    tasks: List[Task] = Field(default_factory=list)


class TasksResponse(CamelModel):
    tasks_with_status: List[TaskWithStatus]
    all_completed: bool
    any_failed: bool
    completed_count: int
    total_count: int


class SortOption(CamelModel):
    label: str
    value: str


class SortReplica(CamelModel):
    attribute: str
    direction: str
    replica: str
