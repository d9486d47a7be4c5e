"""Config module - pull request configuration schema, resolution and loading."""

from .schema import (
    DEFAULT_BASE_URL,
    DEFAULT_PR_CONFIG,
    ClientConfig,
    MergeStrategy,
    PullRequestConfig,
)
from .resolver import resolve_pr_config
from .loader import load_client_config

__all__ = [
    "DEFAULT_BASE_URL",
    "DEFAULT_PR_CONFIG",
    "ClientConfig",
    "MergeStrategy",
    "PullRequestConfig",
    "resolve_pr_config",
    "load_client_config",
]
