"""Hypersonic - create GitHub pull requests from content and local files."""

__version__ = "0.1.0"

from .config import ClientConfig, MergeStrategy, PullRequestConfig, load_client_config
from .errors import (
    ConfigurationError,
    GatewayError,
    GitError,
    HypersonicError,
    LocalIOError,
    ProtocolError,
    ValidationError,
)
from .pr import GitHubGateway, Hypersonic, RepositoryGateway

__all__ = [
    "__version__",
    "ClientConfig",
    "MergeStrategy",
    "PullRequestConfig",
    "load_client_config",
    "ConfigurationError",
    "GatewayError",
    "GitError",
    "HypersonicError",
    "LocalIOError",
    "ProtocolError",
    "ValidationError",
    "GitHubGateway",
    "Hypersonic",
    "RepositoryGateway",
]
