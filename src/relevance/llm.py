"""
Model clients for structured configuration generation.

Two providers are supported: Anthropic (Claude) and OpenAI. Callers build a
client explicitly with create_model_client() and pass it to the generators;
there is no shared default client. Every call asks the model for a single
JSON object matching a pydantic schema and returns the parsed object along
with the token usage reported by the provider.
"""

import json
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Literal, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from config.settings import Settings, get_settings, provider_key
from core.logging import get_logger
from relevance.models import TokenUsage

logger = get_logger(__name__)

Provider = Literal["anthropic", "openai"]
SchemaT = TypeVar("SchemaT", bound=BaseModel)


# =============================================================================
# Model Registry
# =============================================================================

@dataclass(frozen=True)
class ModelSpec:
    """A supported model and its pricing in USD per million tokens."""
    name: str
    provider: Provider
    input_token_cost: float
    output_token_cost: float


DEFAULT_MODEL = "claude-3-5-haiku-latest"

MODEL_REGISTRY: Dict[str, ModelSpec] = {
    spec.name: spec
    for spec in (
        ModelSpec("claude-3-5-haiku-latest", "anthropic", 0.80, 4.00),
        ModelSpec("claude-3-5-sonnet-latest", "anthropic", 3.00, 15.00),
        ModelSpec("gpt-4.1-nano", "openai", 0.10, 0.40),
    )
}

SUPPORTED_MODELS: List[str] = list(MODEL_REGISTRY)

API_KEY_ENV_VARS: Dict[str, str] = {
    "anthropic": "ANTHROPIC_API_KEY",
    "openai": "OPENAI_API_KEY",
}


class MissingCredentialsError(ValueError):
    """Raised when the API key for a model's provider is not configured."""

    def __init__(self, model_name: str, env_var: str):
        self.model_name = model_name
        self.env_var = env_var
        super().__init__(f"Missing {env_var} (required for model {model_name})")


class ModelResponseError(RuntimeError):
    """Raised when a model answer cannot be parsed into the requested schema."""


def get_model_spec(model_name: str) -> ModelSpec:
    """Look up a model, raising ValueError for anything unsupported."""
    spec = MODEL_REGISTRY.get(model_name)
    if spec is None:
        raise ValueError(
            f"Unsupported model: {model_name}. "
            f"Supported models: {', '.join(SUPPORTED_MODELS)}"
        )
    return spec


def get_model_provider(model_name: str) -> Provider:
    """Provider for a model name; unknown names default to Anthropic."""
    spec = MODEL_REGISTRY.get(model_name)
    return spec.provider if spec else "anthropic"


def get_model_pricing(model_name: str) -> Optional[ModelSpec]:
    return MODEL_REGISTRY.get(model_name)


def required_api_key_env(model_name: str) -> str:
    """Name of the environment variable holding the key for this model's provider."""
    return API_KEY_ENV_VARS[get_model_provider(model_name)]


# =============================================================================
# Response Parsing
# =============================================================================

_JSON_INSTRUCTIONS = """

Respond with a single JSON object that matches this JSON schema:
{schema}

IMPORTANT: Return ONLY valid JSON. No markdown, no explanation outside the JSON."""


def build_structured_prompt(prompt: str, schema: Type[BaseModel]) -> str:
    """Append the JSON output contract for `schema` to a prompt."""
    schema_json = json.dumps(schema.model_json_schema(by_alias=True), indent=2)
    return prompt.rstrip() + _JSON_INSTRUCTIONS.format(schema=schema_json)


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```/```json fence if the model added one."""
    stripped = text.strip()
    if stripped.startswith("```"):
        lines = stripped.split("\n")
        # Drop the opening fence line and, if present, the closing one
        lines = lines[1:]
        if lines and lines[-1].strip().startswith("```"):
            lines = lines[:-1]
        stripped = "\n".join(lines).strip()
    return stripped


def parse_structured_response(raw: Optional[str], schema: Type[SchemaT]) -> SchemaT:
    """
    Parse a model answer into `schema`.

    Raises:
        ModelResponseError: If the answer is empty, not JSON, or doesn't
            validate against the schema.
    """
    if not raw or not raw.strip():
        raise ModelResponseError("Model returned an empty response")

    try:
        data = json.loads(strip_code_fences(raw))
    except json.JSONDecodeError as e:
        raise ModelResponseError(f"Model returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ModelResponseError("Model returned JSON that is not an object")

    try:
        return schema.model_validate(data)
    except ValidationError as e:
        raise ModelResponseError(f"Model response does not match schema: {e}") from e


# =============================================================================
# Clients
# =============================================================================

class ModelClient(ABC):
    """
    Base class for provider clients.

    Subclasses implement _complete(), which performs one completion and
    returns the raw text and token usage.
    """

    provider: Provider

    def __init__(
        self,
        model_name: str,
        api_key: str,
        timeout: float = 60.0,
    ):
        self.model_name = model_name
        self._api_key = api_key
        self._timeout = timeout
        self._client = None
        self._client_lock = threading.Lock()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model_name={self.model_name!r})"

    def generate_object(
        self,
        prompt: str,
        schema: Type[SchemaT],
        max_tokens: int = 1000,
        temperature: float = 0.1,
    ) -> Tuple[SchemaT, TokenUsage]:
        """
        Ask the model for a JSON object matching `schema`.

        Returns:
            Tuple of (parsed schema instance, token usage).

        Raises:
            ModelResponseError: If the answer cannot be parsed.
            Provider SDK errors propagate unchanged.
        """
        raw, usage = self._complete(
            build_structured_prompt(prompt, schema),
            max_tokens=max_tokens,
            temperature=temperature,
        )
        logger.debug(
            "Model call completed",
            model=self.model_name,
            schema=schema.__name__,
            input_tokens=usage.input_tokens,
            output_tokens=usage.output_tokens,
        )
        return parse_structured_response(raw, schema), usage

    @abstractmethod
    def _complete(self, prompt: str, max_tokens: int, temperature: float) -> Tuple[str, TokenUsage]:
        """Run one completion and return (raw text, token usage)."""


class AnthropicModelClient(ModelClient):
    provider: Provider = "anthropic"

    @property
    def client(self):
        """Lazy-load Anthropic client."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    from anthropic import Anthropic
                    self._client = Anthropic(api_key=self._api_key, timeout=self._timeout)
        return self._client

    def _complete(self, prompt: str, max_tokens: int, temperature: float) -> Tuple[str, TokenUsage]:
        response = self.client.messages.create(
            model=self.model_name,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": prompt}],
        )

        text = "".join(
            block.text for block in response.content if getattr(block, "type", None) == "text"
        )
        usage = TokenUsage(
            input_tokens=response.usage.input_tokens,
            output_tokens=response.usage.output_tokens,
            total_tokens=response.usage.input_tokens + response.usage.output_tokens,
        )
        return text, usage


class OpenAIModelClient(ModelClient):
    provider: Provider = "openai"

    @property
    def client(self):
        """Lazy-load OpenAI client."""
        if self._client is None:
            with self._client_lock:
                if self._client is None:
                    from openai import OpenAI
                    self._client = OpenAI(api_key=self._api_key, timeout=self._timeout)
        return self._client

    def _complete(self, prompt: str, max_tokens: int, temperature: float) -> Tuple[str, TokenUsage]:
        response = self.client.chat.completions.create(
            model=self.model_name,
            messages=[{"role": "user", "content": prompt}],
            temperature=temperature,
            max_tokens=max_tokens,
            response_format={"type": "json_object"},
        )

        text = response.choices[0].message.content or ""
        usage = TokenUsage()
        if response.usage is not None:
            usage = TokenUsage(
                input_tokens=response.usage.prompt_tokens,
                output_tokens=response.usage.completion_tokens,
                total_tokens=response.usage.total_tokens,
            )
        return text, usage


_CLIENT_CLASSES: Dict[str, Type[ModelClient]] = {
    "anthropic": AnthropicModelClient,
    "openai": OpenAIModelClient,
}


def create_model_client(
    model_name: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> ModelClient:
    """
    Build a client for a supported model.

    Args:
        model_name: One of SUPPORTED_MODELS (default: settings.default_model).
        settings: Settings to read provider keys from (default: get_settings()).

    Raises:
        ValueError: If the model is not supported.
        MissingCredentialsError: If the provider's API key is not configured.
    """
    settings = settings or get_settings()
    spec = get_model_spec(model_name or settings.default_model)

    api_key = provider_key(settings, spec.provider)
    if not api_key:
        raise MissingCredentialsError(spec.name, API_KEY_ENV_VARS[spec.provider])

    return _CLIENT_CLASSES[spec.provider](
        spec.name,
        api_key=api_key,
        timeout=settings.llm_timeout_seconds,
    )
