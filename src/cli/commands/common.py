"""
Helpers shared by the analyze and compare commands.
"""

import argparse
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from config.settings import Settings
from relevance.costs import CostTracker
from relevance.generation import ConfigurationOptions, GeneratedConfigurations, generate_configurations
from relevance.models import SECTION_TITLES
from cli.display import format_cost_summary
from cli.interactive import ConfigurationSection
from cli.validation import CLIError, parse_compare_models, validate_env_vars


def resolve_models(args: argparse.Namespace, settings: Settings) -> Tuple[str, Optional[str]]:
    """
    Models for this run: (model, None) or the two --compare-models entries.

    Raises:
        CLIError / ValueError / MissingCredentialsError: Invalid models or missing keys.
    """
    first: str = args.model or settings.default_model
    second: Optional[str] = None

    if args.compare_models:
        first, second = parse_compare_models(args.compare_models)

    validate_env_vars(first, settings)
    if second:
        validate_env_vars(second, settings)

    return first, second


def options_from_args(args: argparse.Namespace) -> ConfigurationOptions:
    return ConfigurationOptions(
        searchable=args.searchable,
        ranking=args.ranking,
        faceting=args.faceting,
        sortable=args.sortable,
    )


def resolve_limit(args: argparse.Namespace, settings: Settings) -> int:
    limit = args.limit if args.limit is not None else settings.default_sample_limit
    if limit < 1:
        raise CLIError("--limit must be a positive number")
    return limit


def run_generation(
    records: List[dict],
    limit: int,
    options: ConfigurationOptions,
    models: Sequence[str],
    cost_tracker: CostTracker,
    settings: Settings,
) -> List[GeneratedConfigurations]:
    """Generate configurations for each model; multiple models run concurrently."""
    if len(models) == 1:
        return [generate_configurations(
            records, limit, options,
            model_name=models[0], cost_tracker=cost_tracker, settings=settings,
        )]

    with ThreadPoolExecutor(max_workers=len(models)) as pool:
        futures = [
            pool.submit(
                generate_configurations, records, limit, options,
                model_name=model, cost_tracker=cost_tracker, settings=settings,
            )
            for model in models
        ]
        return [future.result() for future in futures]


def apply_sections(results: GeneratedConfigurations) -> List[ConfigurationSection]:
    """Sections offered by the interactive apply flow."""
    return [
        ConfigurationSection(title=SECTION_TITLES[setting], setting=setting, config=list(result.data))
        for setting, result in results.sections().items()
    ]


def print_cost_summary(cost_tracker: CostTracker) -> None:
    if cost_tracker.costs:
        print(format_cost_summary(cost_tracker.summary()))
