"""
Input checks for CLI commands.
"""

import json
from typing import Any, Dict, List, Optional, Tuple

from config.settings import Settings, get_settings, provider_key
from relevance.llm import MissingCredentialsError, get_model_spec, required_api_key_env


class CLIError(Exception):
    """A user-facing error; the command prints it and exits with status 1."""


def validate_env_vars(model_name: str, settings: Optional[Settings] = None) -> None:
    """
    Check that the model is supported and its provider key is configured.

    Raises:
        ValueError: Unsupported model.
        MissingCredentialsError: Provider key is not set.
    """
    settings = settings or get_settings()
    spec = get_model_spec(model_name)

    if not provider_key(settings, spec.provider):
        raise MissingCredentialsError(spec.name, required_api_key_env(spec.name))


def missing_credentials_help(error: MissingCredentialsError) -> str:
    return "\n".join([
        "❌ Missing required environment variables:",
        f"   - {error.env_var}",
        "",
        "Please create a .env file with the required variables.",
        "Example .env file:",
        f"{error.env_var}=your_{error.env_var.lower()}_here",
    ])


def validate_json_file(content: str) -> List[Dict[str, Any]]:
    """
    Parse a records file.

    Raises:
        CLIError: If the content is not JSON or not a JSON array.
    """
    try:
        records = json.loads(content)
    except json.JSONDecodeError as e:
        raise CLIError("Invalid JSON file") from e

    if not isinstance(records, list):
        raise CLIError("JSON file must contain an array of records")

    return records


def parse_compare_models(value: str) -> Tuple[str, str]:
    """Split "model1,model2" into two model names."""
    models = [m.strip() for m in value.split(",") if m.strip()]
    if len(models) != 2:
        raise CLIError("--compare-models must specify exactly two models (format: model1,model2)")
    return models[0], models[1]
