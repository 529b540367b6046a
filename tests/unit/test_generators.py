"""
Tests for the per-setting configuration generators.

Model calls are served by FakeModelClient (see conftest); fallbacks are
exercised by making the fake raise.
"""

import pytest

from relevance.costs import CostTracker
from relevance.generators import (
    MAX_SORTABLE_ATTRIBUTES,
    generate_attributes_for_faceting,
    generate_custom_ranking,
    generate_searchable_attributes,
    generate_sort_by_replicas,
)
from relevance.llm import ModelResponseError
from relevance.models import ConfigurationType


SEARCHABLE = ConfigurationType.SEARCHABLE_ATTRIBUTES
RANKING = ConfigurationType.CUSTOM_RANKING
FACETING = ConfigurationType.ATTRIBUTES_FOR_FACETING
SORTABLE = ConfigurationType.SORTABLE_ATTRIBUTES


def _failing_client(make_model_client):
    error = ModelResponseError("Model returned invalid JSON")
    return make_model_client({setting: error for setting in ConfigurationType})


class TestSearchableAttributes:

    def test_model_suggestion_is_kept(self, sample_records, fake_model_client):
        result = generate_searchable_attributes(sample_records, fake_model_client)

        assert result.setting == SEARCHABLE
        assert result.data == ["name", "brand", "unordered(description)"]
        assert result.reasoning == "Names and brands are what shoppers type."
        assert result.fallback is False
        assert result.reason_for("brand") == "Brand searches are common"

    def test_missing_attributes_filtered_with_note(self, sample_records, make_model_client):
        client = make_model_client({SEARCHABLE: {
            "searchableAttributes": ["name", "color", "material"],
            "reasoning": "Picked text fields.",
            "attributeReasons": [
                {"attribute": "name", "reason": "Name"},
                {"attribute": "color", "reason": "Color"},
            ],
        }})

        result = generate_searchable_attributes(sample_records, client)

        assert result.data == ["name"]
        assert result.reasoning == (
            "Picked text fields. Filtered out 2 non-existent attribute(s) from AI suggestions."
        )
        assert [r.attribute for r in result.attribute_reasons] == ["name"]

    def test_no_note_when_nothing_filtered(self, sample_records, fake_model_client):
        result = generate_searchable_attributes(sample_records, fake_model_client)
        assert "Filtered out" not in result.reasoning

    def test_only_first_records_are_sampled(self, sample_records, fake_model_client):
        generate_searchable_attributes(sample_records, fake_model_client, limit=1)

        prompt = fake_model_client.prompts[0]
        assert "Honeycrisp Apple" in prompt
        assert "Bartlett Pear" not in prompt

    def test_fallback_on_model_failure(self, sample_records, make_model_client):
        result = generate_searchable_attributes(sample_records, _failing_client(make_model_client))

        assert result.fallback is True
        assert result.data == ["name", "description", "brand"]
        assert result.reasoning == "Fallback: Selected string attributes excluding URLs and IDs"

    def test_fallback_with_no_records(self, make_model_client):
        result = generate_searchable_attributes([], _failing_client(make_model_client))
        assert result.fallback is True
        assert result.data == []


class TestCustomRanking:

    def test_model_suggestion_is_kept(self, sample_records, fake_model_client):
        result = generate_custom_ranking(sample_records, fake_model_client)

        assert result.data == ["desc(sales_count)", "desc(rating)"]
        assert result.reason_for("desc(sales_count)") == "Popularity signal"
        assert result.reason_for("desc(rating)") == "Quality signal"

    def test_unknown_ranking_attribute_dropped(self, sample_records, make_model_client):
        client = make_model_client({RANKING: {
            "customRanking": ["desc(popularity)", "asc(price)"],
            "reasoning": "r",
        }})

        result = generate_custom_ranking(sample_records, client)

        assert result.data == ["asc(price)"]
        assert "Filtered out 1 non-existent attribute(s)" in result.reasoning

    def test_fallback_on_model_failure(self, sample_records, make_model_client):
        result = generate_custom_ranking(sample_records, _failing_client(make_model_client))

        assert result.fallback is True
        assert result.data == ["desc(sales_count)", "desc(rating)"]


class TestAttributesForFaceting:

    def test_hierarchical_facets_prepended(self, sample_records, fake_model_client):
        result = generate_attributes_for_faceting(sample_records, fake_model_client)

        assert result.data == ["categories", "searchable(brand)", "in_stock"]
        assert result.reasoning.endswith("Additionally, detected hierarchical facets: categories.")

    def test_hierarchical_objects_hidden_from_model(self, sample_records, fake_model_client):
        generate_attributes_for_faceting(sample_records, fake_model_client)

        prompt = fake_model_client.prompts[0]
        assert "Food > Fruits" not in prompt
        assert "Orchard Co" in prompt

    def test_model_cannot_suggest_hierarchical_attribute(self, sample_records, make_model_client):
        """The stripped sample is used for validation too."""
        client = make_model_client({FACETING: {
            "attributesForFaceting": ["categories.lvl0", "brand"],
            "reasoning": "r",
        }})

        result = generate_attributes_for_faceting(sample_records, client)

        assert result.data == ["categories", "brand"]

    def test_no_hierarchy_note_without_hierarchical_facets(self, make_model_client):
        records = [{"brand": "A", "color": "red"}]
        client = make_model_client({FACETING: {"attributesForFaceting": ["brand"], "reasoning": "r"}})

        result = generate_attributes_for_faceting(records, client)

        assert result.data == ["brand"]
        assert result.reasoning == "r"

    def test_fallback_keeps_hierarchical_facets(self, sample_records, make_model_client):
        result = generate_attributes_for_faceting(sample_records, _failing_client(make_model_client))

        assert result.fallback is True
        assert result.data == ["categories", "name", "brand", "in_stock"]
        assert result.reasoning.endswith("Additionally detected hierarchical facets: categories")


class TestSortByReplicas:

    def test_model_suggestion_is_kept(self, sample_records, fake_model_client):
        result = generate_sort_by_replicas(sample_records, fake_model_client)
        assert result.data == ["price", "rating"]

    def test_capped_at_four(self, sample_records, make_model_client):
        client = make_model_client({SORTABLE: {
            "sortableAttributes": ["price", "rating", "sales_count", "name", "brand", "in_stock"],
            "reasoning": "r",
        }})

        result = generate_sort_by_replicas(sample_records, client)

        assert len(result.data) == MAX_SORTABLE_ATTRIBUTES
        assert result.data == ["price", "rating", "sales_count", "name"]

    def test_fallback_on_model_failure(self, sample_records, make_model_client):
        result = generate_sort_by_replicas(sample_records, _failing_client(make_model_client))

        assert result.fallback is True
        assert result.data == ["price", "sales_count", "rating"]


class TestCostTracking:

    @pytest.mark.parametrize("generator", [
        generate_searchable_attributes,
        generate_custom_ranking,
        generate_attributes_for_faceting,
        generate_sort_by_replicas,
    ])
    def test_usage_recorded(self, generator, sample_records, fake_model_client):
        tracker = CostTracker()

        generator(sample_records, fake_model_client, cost_tracker=tracker)

        costs = tracker.costs
        assert len(costs) == 1
        assert costs[0].model_name == "claude-3-5-haiku-latest"
        assert costs[0].usage.total_tokens == 150

    def test_failed_call_records_nothing(self, sample_records, make_model_client):
        tracker = CostTracker()
        generate_custom_ranking(sample_records, _failing_client(make_model_client), cost_tracker=tracker)
        assert tracker.costs == []
