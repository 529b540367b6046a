"""
Pytest configuration and shared fixtures for the generative relevance tests.
"""
import os
import sys
from typing import Any, Callable, Dict, List, Optional, Union

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

from config.settings import get_settings
from relevance.llm import ModelClient, ModelResponseError
from relevance.models import ConfigurationType, TokenUsage


# ============================================================================
# Fixtures: Settings
# ============================================================================

TEST_ENV = {
    "ENVIRONMENT": "testing",
    "DEBUG": "false",
    "ANTHROPIC_API_KEY": "test-anthropic-key",
    "OPENAI_API_KEY": "test-openai-key",
    "DEFAULT_MODEL": "claude-3-5-haiku-latest",
    "BASIC_AUTH_USERNAME": "admin",
    "BASIC_AUTH_PASSWORD": "secret",
    "ALGOLIA_APP_ID": "",
    "ALGOLIA_WRITE_KEY": "",
}


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    """Pin settings to test values; a developer's .env never leaks into tests."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


# ============================================================================
# Fixtures: Test Data Factories
# ============================================================================

@pytest.fixture
def sample_records() -> List[dict]:
    """Product records with text, numeric, boolean, nested and hierarchical attributes."""
    return [
        {
            "objectID": "1",
            "name": "Honeycrisp Apple",
            "description": "Crisp and sweet red apple",
            "brand": "Orchard Co",
            "in_stock": True,
            "price": 1.5,
            "sales_count": 1200,
            "rating": 4.7,
            "image_url": "https://example.com/apple.jpg",
            "categories": {"lvl0": "Food", "lvl1": "Food > Fruits"},
            "author": {"name": "Farm Team", "id": 7},
            "tags": ["fruit", "fresh"],
        },
        {
            "objectID": "2",
            "name": "Bartlett Pear",
            "description": "Juicy green pear",
            "brand": "Orchard Co",
            "in_stock": False,
            "price": 2.0,
            "sales_count": 300,
            "rating": 4.1,
            "image_url": "https://example.com/pear.jpg",
            "categories": {"lvl0": "Food", "lvl1": "Food > Fruits"},
            "author": {"name": "Farm Team", "id": 7},
            "tags": ["fruit"],
        },
        {
            "objectID": "3",
            "name": "Carrot Bundle",
            "description": "Organic carrots",
            "brand": "Green Fields",
            "in_stock": True,
            "price": 3.25,
            "sales_count": 80,
            "rating": 3.9,
            "image_url": "https://example.com/carrot.jpg",
            "categories": {"lvl0": "Food", "lvl1": "Food > Vegetables"},
            "author": {"name": "Field Team", "id": 9},
            "tags": ["vegetable"],
            "season": "autumn",
        },
    ]


# ============================================================================
# Fixtures: Model Clients
# ============================================================================

FakeResponse = Union[Dict[str, Any], Exception]


class FakeModelClient(ModelClient):
    """
    Model client returning canned structured answers per setting.

    `responses` maps a ConfigurationType to the JSON object the model
    "returns" (or an exception to raise). Every call reports 100 input and
    50 output tokens.
    """

    provider = "anthropic"

    def __init__(
        self,
        responses: Optional[Dict[ConfigurationType, FakeResponse]] = None,
        model_name: str = "claude-3-5-haiku-latest",
    ):
        super().__init__(model_name, api_key="test-key")
        self.responses = responses or {}
        self.prompts: List[str] = []

    def generate_object(self, prompt, schema, max_tokens=1000, temperature=0.1):
        self.prompts.append(prompt)
        response = self.responses.get(schema.setting)

        if isinstance(response, Exception):
            raise response
        if response is None:
            raise ModelResponseError("Model returned an empty response")

        usage = TokenUsage(input_tokens=100, output_tokens=50, total_tokens=150)
        return schema.model_validate(response), usage

    def _complete(self, prompt, max_tokens, temperature):
        raise AssertionError("FakeModelClient answers through generate_object")


@pytest.fixture
def make_model_client() -> Callable[..., FakeModelClient]:
    """Factory for FakeModelClient instances."""
    return FakeModelClient


@pytest.fixture
def model_responses() -> Dict[ConfigurationType, Dict[str, Any]]:
    """A plausible model answer for every setting, using the sample_records attributes."""
    return {
        ConfigurationType.SEARCHABLE_ATTRIBUTES: {
            "searchableAttributes": ["name", "brand", "unordered(description)"],
            "reasoning": "Names and brands are what shoppers type.",
            "attributeReasons": [
                {"attribute": "name", "reason": "Primary product name"},
                {"attribute": "brand", "reason": "Brand searches are common"},
                {"attribute": "unordered(description)", "reason": "Long text"},
            ],
        },
        ConfigurationType.CUSTOM_RANKING: {
            "customRanking": ["desc(sales_count)", "desc(rating)"],
            "reasoning": "Best sellers first, then rating.",
            "attributeReasons": [
                {"attribute": "sales_count", "reason": "Popularity signal"},
                {"attribute": "desc(rating)", "reason": "Quality signal"},
            ],
        },
        ConfigurationType.ATTRIBUTES_FOR_FACETING: {
            "attributesForFaceting": ["searchable(brand)", "in_stock"],
            "reasoning": "Brand and availability are common filters.",
            "attributeReasons": [],
        },
        ConfigurationType.SORTABLE_ATTRIBUTES: {
            "sortableAttributes": ["price", "rating"],
            "reasoning": "Price and rating are what users sort by.",
            "attributeReasons": [],
        },
    }


@pytest.fixture
def fake_model_client(model_responses) -> FakeModelClient:
    return FakeModelClient(model_responses)


# ============================================================================
# Fixtures: FastAPI Test Client
# ============================================================================

@pytest.fixture
def app():
    """Get the FastAPI application."""
    from api.app import create_app
    return create_app()


@pytest.fixture
def client(app):
    """Synchronous HTTP client for testing FastAPI endpoints."""
    from fastapi.testclient import TestClient
    return TestClient(app)


@pytest.fixture
def auth() -> tuple:
    """Basic auth credentials matching TEST_ENV."""
    return ("admin", "secret")


# ============================================================================
# Markers
# ============================================================================

def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: marks tests as unit tests")
    config.addinivalue_line("markers", "integration: marks tests as integration tests")
