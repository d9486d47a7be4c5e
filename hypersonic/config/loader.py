"""Load client configuration from a YAML file and the environment."""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError as PydanticValidationError

from ..errors import ConfigurationError
from .schema import ClientConfig

TOKEN_ENV_VAR = "GITHUB_TOKEN"
BASE_URL_ENV_VAR = "GITHUB_API_URL"


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Read a YAML config file into a dict.

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping
    """
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Could not read config file {path}: {e}", cause=e) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def load_client_config(
    path: Optional[Union[str, Path]] = None,
    token: Optional[str] = None,
    base_url: Optional[str] = None,
) -> ClientConfig:
    """Build a ClientConfig from a config file, the environment and arguments.

    Later sources win: YAML file, then ``GITHUB_TOKEN`` / ``GITHUB_API_URL``,
    then the explicit ``token`` and ``base_url`` arguments.

    Example config file:

        github_token: ghp_xxx
        base_url: https://github.example.com/api/v3
        app_name: release-bot
        default_pr_config:
          labels: [automated]
          reviewers: [octocat]

    Args:
        path: Optional path to a YAML config file
        token: GitHub token, overrides file and environment
        base_url: API base URL, overrides file and environment

    Returns:
        Validated ClientConfig

    Raises:
        ConfigurationError: If no token is found or the config is invalid
    """
    data: Dict[str, Any] = _read_yaml(Path(path)) if path else {}

    env_token = os.environ.get(TOKEN_ENV_VAR)
    if env_token:
        data["github_token"] = env_token
    env_base_url = os.environ.get(BASE_URL_ENV_VAR)
    if env_base_url:
        data["base_url"] = env_base_url

    if token:
        data["github_token"] = token
    if base_url:
        data["base_url"] = base_url

    if not data.get("github_token"):
        raise ConfigurationError(
            f"GitHub token required. Set {TOKEN_ENV_VAR} or pass a token explicitly."
        )

    try:
        return ClientConfig(**data)
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid client config: {e}", cause=e) from e
