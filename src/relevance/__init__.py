"""
Generative relevance: LLM-suggested Algolia index configuration.

Provides:
- validate_attributes: Drop suggested attributes missing from the records
- detect_hierarchical_facets: Find "a > b" category objects in records
- Generators for searchable attributes, custom ranking, faceting and sort replicas
- create_model_client: Anthropic / OpenAI structured-output clients
- CostTracker: Token usage and cost accounting
- IndexConfigClient: Algolia settings, records, replicas and tasks
"""

from relevance.algolia_client import AlgoliaDataError, IndexConfigClient, IndexSnapshot
from relevance.costs import CostTracker, calculate_cost, get_cost_summary
from relevance.generation import (
    ConfigurationOptions,
    GeneratedConfigurations,
    determine_configurations_to_generate,
    generate_configurations,
)
from relevance.generators import (
    generate_attributes_for_faceting,
    generate_custom_ranking,
    generate_searchable_attributes,
    generate_sort_by_replicas,
)
from relevance.hierarchy import detect_hierarchical_facets
from relevance.llm import (
    DEFAULT_MODEL,
    SUPPORTED_MODELS,
    MissingCredentialsError,
    ModelClient,
    create_model_client,
)
from relevance.models import ConfigResult, ConfigurationType
from relevance.replicas import create_sort_replicas, parse_sort_replicas, plan_sort_replicas
from relevance.validation import validate_attributes

__all__ = [
    "AlgoliaDataError",
    "IndexConfigClient",
    "IndexSnapshot",
    "CostTracker",
    "calculate_cost",
    "get_cost_summary",
    "ConfigurationOptions",
    "GeneratedConfigurations",
    "determine_configurations_to_generate",
    "generate_configurations",
    "generate_attributes_for_faceting",
    "generate_custom_ranking",
    "generate_searchable_attributes",
    "generate_sort_by_replicas",
    "detect_hierarchical_facets",
    "DEFAULT_MODEL",
    "SUPPORTED_MODELS",
    "MissingCredentialsError",
    "ModelClient",
    "create_model_client",
    "ConfigResult",
    "ConfigurationType",
    "create_sort_replicas",
    "parse_sort_replicas",
    "plan_sort_replicas",
    "validate_attributes",
]
