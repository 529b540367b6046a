#!/usr/bin/env python3
"""
generative-relevance command line.

Usage:
    generative-relevance analyze records.json -l 20 -v
    generative-relevance analyze records.json --compare-models claude-3-5-haiku-latest,gpt-4.1-nano
    generative-relevance compare APP_ID API_KEY products --ranking --apply

    # From a checkout
    PYTHONPATH=src python -m cli.main analyze records.json
"""

import argparse
import sys
from typing import List, Optional

from dotenv import load_dotenv

from config.settings import get_settings
from core.logging import configure_logging
from relevance.llm import SUPPORTED_MODELS
from cli.commands import analyze, compare


def _add_generation_options(parser: argparse.ArgumentParser, verb: str):
    parser.add_argument("-l", "--limit", type=int, default=None,
                        help="Number of records to analyze (default 10)")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Show detailed reasoning for each configuration")
    parser.add_argument("--searchable", action="store_true", help=f"{verb} searchable attributes only")
    parser.add_argument("--ranking", action="store_true", help=f"{verb} custom ranking only")
    parser.add_argument("--faceting", action="store_true", help=f"{verb} attributes for faceting only")
    parser.add_argument("--sortable", action="store_true", help=f"{verb} sortable attributes only")
    parser.add_argument("-m", "--model", default=None,
                        help=f"AI model to use ({', '.join(SUPPORTED_MODELS)})")
    parser.add_argument("--compare-models", default=None,
                        help="Compare two models (format: model1,model2)")
    parser.add_argument("--apply", action="store_true",
                        help="Offer to apply the suggestions to an Algolia index")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="generative-relevance",
        description="AI-suggested Algolia index configuration",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze", help="Analyze JSON records and generate AI configuration suggestions",
    )
    analyze_parser.add_argument("file", help="Path to JSON file containing records")
    _add_generation_options(analyze_parser, "Generate")
    analyze_parser.set_defaults(handler=analyze.run)

    compare_parser = subparsers.add_parser(
        "compare", help="Compare existing Algolia index settings with AI suggestions",
    )
    compare_parser.add_argument("app_id", help="Algolia App ID")
    compare_parser.add_argument("api_key", help="Algolia Admin API Key")
    compare_parser.add_argument("index_name", help="Algolia Index Name")
    _add_generation_options(compare_parser, "Compare")
    compare_parser.set_defaults(handler=compare.run)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    # .env in the working directory, as well as the project root read by get_settings()
    load_dotenv()
    settings = get_settings()

    # stdout carries the report
    configure_logging(
        json_logs=settings.is_production,
        log_level="DEBUG" if settings.debug else "WARNING",
        stream=sys.stderr,
    )

    return args.handler(args, settings)


if __name__ == "__main__":
    sys.exit(main())
