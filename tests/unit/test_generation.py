"""
Tests for running the generators for one model.
"""

from unittest.mock import patch

import pytest

from relevance.costs import CostTracker
from relevance.generation import (
    ConfigurationOptions,
    GeneratedConfigurations,
    determine_configurations_to_generate,
    generate_configurations,
)
from relevance.llm import MissingCredentialsError
from relevance.models import ConfigurationType


class TestDetermineConfigurations:

    def test_no_flags_means_all(self):
        assert determine_configurations_to_generate(ConfigurationOptions()) == list(ConfigurationType)

    def test_selected_flags_only(self):
        options = ConfigurationOptions(ranking=True, sortable=True)
        assert determine_configurations_to_generate(options) == [
            ConfigurationType.CUSTOM_RANKING,
            ConfigurationType.SORTABLE_ATTRIBUTES,
        ]


class TestGenerateConfigurations:

    def test_all_sections(self, sample_records, fake_model_client):
        generated = generate_configurations(sample_records, 10, model_client=fake_model_client)

        assert generated.model_name == "claude-3-5-haiku-latest"
        assert list(generated.sections()) == list(ConfigurationType)
        assert generated.get(ConfigurationType.SORTABLE_ATTRIBUTES).data == ["price", "rating"]

    def test_unrequested_sections_are_none(self, sample_records, fake_model_client):
        generated = generate_configurations(
            sample_records, 10,
            options=ConfigurationOptions(searchable=True),
            model_client=fake_model_client,
        )

        assert generated.searchable_attributes is not None
        assert generated.custom_ranking is None
        assert list(generated.sections()) == [ConfigurationType.SEARCHABLE_ATTRIBUTES]
        assert len(fake_model_client.prompts) == 1

    def test_costs_collected_across_threads(self, sample_records, fake_model_client):
        tracker = CostTracker()

        generate_configurations(sample_records, 10, model_client=fake_model_client, cost_tracker=tracker)

        assert len(tracker.costs) == 4
        assert tracker.summary().total_usage.total_tokens == 600

    def test_builds_client_from_model_name(self, sample_records, fake_model_client):
        with patch("relevance.generation.create_model_client", return_value=fake_model_client) as factory:
            generate_configurations(sample_records, 5, model_name="claude-3-5-haiku-latest")

        assert factory.call_args.args[0] == "claude-3-5-haiku-latest"

    def test_unsupported_model(self, sample_records):
        with pytest.raises(ValueError, match="Unsupported model"):
            generate_configurations(sample_records, 5, model_name="not-a-model")

    def test_missing_credentials(self, sample_records, monkeypatch):
        from config.settings import get_settings

        monkeypatch.setenv("OPENAI_API_KEY", "")
        get_settings.cache_clear()

        with pytest.raises(MissingCredentialsError):
            generate_configurations(sample_records, 5, model_name="gpt-4.1-nano")


class TestToResponse:

    def test_camel_case_payload(self, sample_records, fake_model_client):
        generated = generate_configurations(
            sample_records, 10,
            options=ConfigurationOptions(ranking=True),
            model_client=fake_model_client,
        )

        payload = generated.to_response()

        assert list(payload) == ["customRanking"]
        section = payload["customRanking"]
        assert section["data"] == ["desc(sales_count)", "desc(rating)"]
        assert section["fallback"] is False
        assert "attributeReasons" in section
        assert "setting" not in section

    def test_empty(self):
        assert GeneratedConfigurations(model_name="m").to_response() == {}
