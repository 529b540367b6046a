"""
Run the configuration generators for one model.

The selected generators run concurrently in a thread pool; model SDK calls
are blocking I/O, so threads are enough.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from config.settings import Settings, get_settings
from core.logging import get_logger
from relevance.costs import CostTracker
from relevance.generators import GENERATORS
from relevance.llm import ModelClient, create_model_client
from relevance.models import ConfigResult, ConfigurationType

logger = get_logger(__name__)


@dataclass
class ConfigurationOptions:
    """Which settings to generate. Selecting none means all of them."""
    searchable: bool = False
    ranking: bool = False
    faceting: bool = False
    sortable: bool = False


def determine_configurations_to_generate(options: ConfigurationOptions) -> List[ConfigurationType]:
    generate_all = not (options.searchable or options.ranking or options.faceting or options.sortable)

    selected = {
        ConfigurationType.SEARCHABLE_ATTRIBUTES: options.searchable,
        ConfigurationType.CUSTOM_RANKING: options.ranking,
        ConfigurationType.ATTRIBUTES_FOR_FACETING: options.faceting,
        ConfigurationType.SORTABLE_ATTRIBUTES: options.sortable,
    }
    return [setting for setting, chosen in selected.items() if generate_all or chosen]


@dataclass
class GeneratedConfigurations:
    """One model's results; sections that were not requested stay None."""
    model_name: str
    searchable_attributes: Optional[ConfigResult] = None
    custom_ranking: Optional[ConfigResult] = None
    attributes_for_faceting: Optional[ConfigResult] = None
    sortable_attributes: Optional[ConfigResult] = None

    def get(self, setting: ConfigurationType) -> Optional[ConfigResult]:
        return getattr(self, _FIELD_BY_SETTING[setting])

    def sections(self) -> Dict[ConfigurationType, ConfigResult]:
        """Generated sections in display order."""
        sections = {}
        for setting in ConfigurationType:
            result = self.get(setting)
            if result is not None:
                sections[setting] = result
        return sections

    def to_response(self) -> Dict[str, Any]:
        """camelCase payload keyed by Algolia setting name."""
        return {
            setting.value: result.model_dump(by_alias=True, exclude={"setting"})
            for setting, result in self.sections().items()
        }


_FIELD_BY_SETTING = {
    ConfigurationType.SEARCHABLE_ATTRIBUTES: "searchable_attributes",
    ConfigurationType.CUSTOM_RANKING: "custom_ranking",
    ConfigurationType.ATTRIBUTES_FOR_FACETING: "attributes_for_faceting",
    ConfigurationType.SORTABLE_ATTRIBUTES: "sortable_attributes",
}


def generate_configurations(
    records: List[Dict[str, Any]],
    limit: int,
    options: Optional[ConfigurationOptions] = None,
    model_name: Optional[str] = None,
    model_client: Optional[ModelClient] = None,
    cost_tracker: Optional[CostTracker] = None,
    settings: Optional[Settings] = None,
) -> GeneratedConfigurations:
    """
    Generate the selected settings for one model.

    Args:
        records: Records to sample from.
        limit: Number of records to send to the model.
        options: Which settings to generate (default: all).
        model_name: Model to build a client for, if `model_client` is not given.
        model_client: Pre-built client (takes precedence over `model_name`).
        cost_tracker: Collects token usage for this run.
        settings: Settings used to build the client.

    Raises:
        ValueError / MissingCredentialsError: If no client can be built.
    """
    settings = settings or get_settings()
    client = model_client or create_model_client(model_name, settings)
    to_generate = determine_configurations_to_generate(options or ConfigurationOptions())

    logger.info(
        "Generating configurations",
        model=client.model_name,
        settings=[s.value for s in to_generate],
        records=min(len(records), limit),
    )

    result = GeneratedConfigurations(model_name=client.model_name)

    with ThreadPoolExecutor(max_workers=max(len(to_generate), 1)) as pool:
        futures = {
            setting: pool.submit(
                GENERATORS[setting],
                records,
                client,
                limit=limit,
                cost_tracker=cost_tracker,
            )
            for setting in to_generate
        }
        for setting, future in futures.items():
            setattr(result, _FIELD_BY_SETTING[setting], future.result())

    return result
