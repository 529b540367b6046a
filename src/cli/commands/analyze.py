"""
`analyze`: generate configuration suggestions from a JSON file of records.
"""

import argparse
import sys
import time
from pathlib import Path

from config.settings import Settings
from core.logging import bind_context, get_logger
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
from cli.display import display_dual_model_comparison, display_section
from cli.interactive import (
    InteractiveOptions,
    ask_required,
    prompt_analyze_results,
    prompt_apply_configuration,
)
from cli.validation import missing_credentials_help, validate_json_file

logger = get_logger(__name__)


def run(args: argparse.Namespace, settings: Settings) -> int:
    start = time.time()

    try:
        first_model, second_model = resolve_models(args, settings)
        bind_context(command="analyze", model=first_model)

        print(f"🔍 Loading records from: {args.file}")
        records = validate_json_file(Path(args.file).read_text(encoding="utf-8"))

        limit = resolve_limit(args, settings)
        options = options_from_args(args)
        cost_tracker = CostTracker()

        print(f"📊 Analyzing {min(len(records), limit)} records...\n")
        if args.verbose:
            print("🔧 Verbose mode enabled - will show reasoning\n")

        if second_model:
            print(f"⚡ Generating AI configurations with dual-model comparison: {first_model} vs {second_model}...")
            first, second = run_generation(
                records, limit, options, [first_model, second_model], cost_tracker, settings,
            )

            print("\n🎯 Model Comparison Results\n")
            print("━" * 50 + "\n")

            for setting in ConfigurationType:
                if first.get(setting) is not None or second.get(setting) is not None:
                    display_dual_model_comparison(
                        SECTION_TITLES[setting],
                        first.get(setting),
                        second.get(setting),
                        first_model,
                        second_model,
                        args.verbose,
                    )
        else:
            print("⚡ Generating AI configurations...")
            (first,) = run_generation(records, limit, options, [first_model], cost_tracker, settings)

            print("\n🎯 AI Configuration Suggestions\n")
            print("━" * 50 + "\n")

            for setting, result in first.sections().items():
                display_section(SECTION_TITLES[setting], result, args.verbose)

        print_cost_summary(cost_tracker)
        print(f"\n✅ Analysis complete! (took {time.time() - start:.2f}s)")

        if args.apply:
            should_apply, credentials = prompt_analyze_results(settings.has_algolia_credentials)
            if should_apply:
                if credentials is None:
                    credentials = InteractiveOptions(
                        app_id=settings.algolia_app_id,
                        api_key=settings.algolia_write_key,
                        index_name=ask_required("Enter the index name to update:", "Index name is required"),
                    )
                prompt_apply_configuration(apply_sections(first), credentials)

        return 0

    except MissingCredentialsError as e:
        print(missing_credentials_help(e), file=sys.stderr)
        return 1
    except Exception as e:
        logger.debug("Analyze failed", error=str(e), error_type=type(e).__name__)
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1
