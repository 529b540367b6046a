"""
Tests for the interactive apply flow.
"""

from unittest.mock import MagicMock, patch

import pytest

from cli.interactive import (
    ConfigurationSection,
    InteractiveOptions,
    confirm,
    prompt_analyze_results,
    prompt_apply_configuration,
    select_sections,
)
from relevance.models import ConfigurationType
from relevance.replicas import SortReplicaResult


@pytest.fixture
def answer(monkeypatch):
    """Feed scripted answers to input()."""
    def script(*answers):
        remaining = iter(answers)
        monkeypatch.setattr("builtins.input", lambda prompt="": next(remaining))
    return script


@pytest.fixture
def sections():
    return [
        ConfigurationSection(
            title="🔍 Searchable Attributes",
            setting=ConfigurationType.SEARCHABLE_ATTRIBUTES,
            config=["name", "brand"],
        ),
        ConfigurationSection(
            title="🔀 Sortable Attributes",
            setting=ConfigurationType.SORTABLE_ATTRIBUTES,
            config=["price"],
        ),
    ]


@pytest.fixture
def options():
    return InteractiveOptions(app_id="APP", api_key="KEY", index_name="products")


class TestPrompts:

    @pytest.mark.parametrize("reply,default,expected", [
        ("y", False, True),
        ("YES", False, True),
        ("n", True, False),
        ("", True, True),
        ("", False, False),
        ("maybe", True, False),
    ])
    def test_confirm(self, answer, reply, default, expected):
        answer(reply)
        assert confirm("Continue?", default=default) is expected

    def test_select_all_by_default(self, answer, sections):
        answer("")
        assert select_sections(sections) == [0, 1]

    def test_select_none(self, answer, sections):
        answer("none")
        assert select_sections(sections) == []

    def test_select_reprompts_on_bad_input(self, answer, sections, capsys):
        answer("abc", "7", "2")

        assert select_sections(sections) == [1]

        out = capsys.readouterr().out
        assert "Please enter numbers separated by commas" in out
        assert "Choose numbers between 1 and 2" in out

    def test_analyze_results_asks_for_credentials(self, answer):
        answer("y", "", "APP", "products")

        with patch("cli.interactive.getpass", return_value="KEY"):
            should_apply, credentials = prompt_analyze_results(has_algolia_credentials=False)

        assert should_apply is True
        assert credentials == InteractiveOptions(app_id="APP", api_key="KEY", index_name="products")

    def test_analyze_results_declined(self, answer):
        answer("n")
        assert prompt_analyze_results(has_algolia_credentials=False) == (False, None)


class TestPromptApplyConfiguration:

    def test_applies_selected_sections(self, answer, sections, options, capsys):
        answer("", "", "y")
        factory = MagicMock()
        client = factory.return_value

        with patch("cli.interactive.create_sort_replicas") as create_replicas:
            create_replicas.return_value = SortReplicaResult(
                created=["products_price_asc"], existing=["products_price_desc"],
            )
            assert prompt_apply_configuration(sections, options, client_factory=factory) is True

        factory.assert_called_once_with("APP", "KEY")
        client.set_settings.assert_called_once_with("products", {"searchableAttributes": ["name", "brand"]})
        create_replicas.assert_called_once_with(client, "products", ["price"])
        client.close.assert_called_once()

        out = capsys.readouterr().out
        assert "✓ Replica products_price_desc already exists" in out
        assert "✅ Replica products_price_asc configured successfully" in out
        assert "🎉 Configuration application completed!" in out

    def test_failed_section_does_not_stop_the_rest(self, answer, sections, options, capsys):
        answer("", "", "y")
        factory = MagicMock()
        factory.return_value.set_settings.side_effect = RuntimeError("Method not allowed with this API key")

        with patch("cli.interactive.create_sort_replicas", return_value=SortReplicaResult()):
            assert prompt_apply_configuration(sections, options, client_factory=factory) is True

        out = capsys.readouterr().out
        assert "❌ Failed to apply 🔍 Searchable Attributes: Method not allowed with this API key" in out
        assert "✅ 🔀 Sortable Attributes applied successfully" in out
        assert "✓ All required replicas already exist" in out

    def test_declined_up_front(self, answer, sections, options, capsys):
        answer("n")
        factory = MagicMock()

        assert prompt_apply_configuration(sections, options, client_factory=factory) is False

        factory.assert_not_called()
        assert "👋 No changes applied. Exiting..." in capsys.readouterr().out

    def test_cancelled_after_preview(self, answer, sections, options, capsys):
        answer("", "1", "n")
        factory = MagicMock()

        assert prompt_apply_configuration(sections, options, client_factory=factory) is False

        factory.assert_not_called()
        out = capsys.readouterr().out
        assert "📋 Preview of changes to be applied:" in out
        assert "👋 Changes cancelled. No modifications made." in out
