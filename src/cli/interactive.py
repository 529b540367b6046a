"""
Interactive apply flow for the CLI.

Prompts are plain input()/getpass() so the flow works in any terminal.
"""

from dataclasses import dataclass
from getpass import getpass
from typing import Callable, List, Optional, Tuple

from core.logging import get_logger
from relevance.algolia_client import IndexConfigClient
from relevance.models import ConfigurationType
from relevance.replicas import create_sort_replicas

logger = get_logger(__name__)


@dataclass
class InteractiveOptions:
    app_id: str
    api_key: str
    index_name: str


@dataclass
class ConfigurationSection:
    title: str
    setting: ConfigurationType
    config: List[str]


# =============================================================================
# Prompts
# =============================================================================

def confirm(message: str, default: bool = False) -> bool:
    suffix = "[Y/n]" if default else "[y/N]"
    answer = input(f"{message} {suffix} ").strip().lower()
    if not answer:
        return default
    return answer in ("y", "yes")


def ask_required(message: str, error: str, secret: bool = False) -> str:
    """Prompt until a non-empty answer is given."""
    while True:
        answer = (getpass(f"{message} ") if secret else input(f"{message} ")).strip()
        if answer:
            return answer
        print(f"  {error}")


def select_sections(sections: List[ConfigurationSection]) -> List[int]:
    """
    Let the user pick sections by number (comma-separated).

    An empty answer selects everything; "none" selects nothing.
    """
    print("\nSelect which configurations to apply:")
    for i, section in enumerate(sections, 1):
        print(f"  {i}. {section.title} ({len(section.config)} items)")

    while True:
        answer = input("Numbers to apply (comma-separated, Enter for all, 'none' to skip): ").strip().lower()
        if not answer:
            return list(range(len(sections)))
        if answer == "none":
            return []

        try:
            chosen = sorted({int(part) - 1 for part in answer.split(",") if part.strip()})
        except ValueError:
            print("  Please enter numbers separated by commas")
            continue

        if all(0 <= i < len(sections) for i in chosen):
            return chosen
        print(f"  Choose numbers between 1 and {len(sections)}")


def prompt_analyze_results(has_algolia_credentials: bool) -> Tuple[bool, Optional[InteractiveOptions]]:
    """
    Ask whether to apply the suggestions after `analyze`.

    Without configured Algolia credentials the user is asked for them.
    """
    if not has_algolia_credentials:
        if not confirm("🔧 Would you like to apply these configurations to an Algolia index?"):
            return False, None

        credentials = InteractiveOptions(
            app_id=ask_required("Enter your Algolia App ID:", "App ID is required"),
            api_key=ask_required("Enter your Algolia Admin API Key:", "API Key is required", secret=True),
            index_name=ask_required("Enter the index name to update:", "Index name is required"),
        )
        return True, credentials

    return confirm("🔧 Apply these configurations to your Algolia index?"), None


# =============================================================================
# Apply
# =============================================================================

def apply_configuration_to_index(section: ConfigurationSection, client: IndexConfigClient, index_name: str):
    if section.setting == ConfigurationType.SORTABLE_ATTRIBUTES:
        print("  📋 Creating replica indexes for sortable attributes...")
        result = create_sort_replicas(client, index_name, section.config)

        for name in result.existing:
            print(f"  ✓ Replica {name} already exists")
        for name in result.created:
            print(f"  ✅ Replica {name} configured successfully")
        if not result.created:
            print("  ✓ All required replicas already exist")
        return

    client.set_settings(index_name, {section.setting.value: section.config})


def prompt_apply_configuration(
    sections: List[ConfigurationSection],
    options: InteractiveOptions,
    client_factory: Callable[[str, str], IndexConfigClient] = IndexConfigClient,
) -> bool:
    """
    Walk the user through applying generated sections to an index.

    Returns:
        True if anything was applied.
    """
    print("\n🤖 Ready to apply AI suggestions to your Algolia index!")
    print(f"📍 App ID: {options.app_id}")
    print(f"📍 Index: {options.index_name}\n")

    if not confirm("Would you like to apply any of these configurations?", default=True):
        print("👋 No changes applied. Exiting...")
        return False

    selected = select_sections(sections)
    if not selected:
        print("👋 No configurations selected. Exiting...")
        return False

    print("\n📋 Preview of changes to be applied:")
    for index in selected:
        section = sections[index]
        print(f"\n{section.title}:")
        for i, item in enumerate(section.config, 1):
            print(f"  {i}. {item}")

    if not confirm("⚠️  Apply these changes to your Algolia index?"):
        print("👋 Changes cancelled. No modifications made.")
        return False

    print("\n🚀 Applying configurations...")
    client = client_factory(options.app_id, options.api_key)
    try:
        for index in selected:
            section = sections[index]
            print(f"⏳ Applying {section.title}...")
            try:
                apply_configuration_to_index(section, client, options.index_name)
                print(f"✅ {section.title} applied successfully")
            except Exception as e:
                logger.error("Failed to apply configuration", setting=section.setting.value, error=str(e))
                print(f"❌ Failed to apply {section.title}: {e}")
    finally:
        client.close()

    print("\n🎉 Configuration application completed!")
    return True
