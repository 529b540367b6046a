"""
`compare`: compare a live index's settings with generated suggestions.
"""

import argparse
import sys
import time

from config.settings import Settings
from core.logging import bind_context, get_logger
from relevance.algolia_client import IndexConfigClient
from relevance.costs import CostTracker
from relevance.llm import MissingCredentialsError
from relevance.models import SECTION_TITLES, ConfigurationType
from cli.commands.common import (
    apply_sections,
    options_from_args,
    print_cost_summary,
    resolve_limit,
    resolve_models,
    run_generation,
)
from cli.display import display_comparison, display_triple_comparison
from cli.interactive import InteractiveOptions, confirm, prompt_apply_configuration
from cli.validation import missing_credentials_help

logger = get_logger(__name__)


def run(args: argparse.Namespace, settings: Settings) -> int:
    start = time.time()

    try:
        first_model, second_model = resolve_models(args, settings)
        bind_context(command="compare", model=first_model, index=args.index_name)

        limit = resolve_limit(args, settings)
        options = options_from_args(args)
        cost_tracker = CostTracker()

        if args.verbose:
            print("🔧 Verbose mode enabled - will show reasoning\n")

        print(f"🔍 Fetching settings and records from index: {args.index_name}")
        with IndexConfigClient(args.app_id, args.api_key) as client:
            snapshot = client.fetch_index_data(args.index_name, limit)

        print(f"📊 Analyzing {min(len(snapshot.records), limit)} records...\n")

        if second_model:
            print(f"⚡ Generating AI configurations with dual-model comparison: {first_model} vs {second_model}...")
            first, second = run_generation(
                snapshot.records, limit, options, [first_model, second_model], cost_tracker, settings,
            )

            print("\n🔄 Triple Configuration Comparison\n")
            print("━" * 50 + "\n")

            for setting in ConfigurationType:
                if first.get(setting) is not None or second.get(setting) is not None:
                    display_triple_comparison(
                        SECTION_TITLES[setting],
                        snapshot.current(setting.value),
                        first.get(setting),
                        second.get(setting),
                        first_model,
                        second_model,
                        args.verbose,
                    )
        else:
            print("⚡ Generating AI configurations...")
            (first,) = run_generation(snapshot.records, limit, options, [first_model], cost_tracker, settings)

            print("\n🔄 Configuration Comparison\n")
            print("━" * 50 + "\n")

            for setting, result in first.sections().items():
                display_comparison(
                    SECTION_TITLES[setting],
                    snapshot.current(setting.value),
                    result,
                    args.verbose,
                )

        print_cost_summary(cost_tracker)
        print(f"\n✅ Comparison complete! (took {time.time() - start:.2f}s)")

        if args.apply and confirm("🔧 Apply these configurations to your Algolia index?"):
            prompt_apply_configuration(
                apply_sections(first),
                InteractiveOptions(app_id=args.app_id, api_key=args.api_key, index_name=args.index_name),
            )

        return 0

    except MissingCredentialsError as e:
        print(missing_credentials_help(e), file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Compare failed", error=str(e), error_type=type(e).__name__)
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
