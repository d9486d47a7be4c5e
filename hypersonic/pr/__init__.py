"""PR module - GitHub pull request orchestration."""

from .gateway import RepositoryGateway
from .github import GitHubGateway
from .files import read_text_file
from .orchestrator import (
    Hypersonic,
    commit_message_for,
    generate_branch_name,
    parse_pr_number,
)

__all__ = [
    "RepositoryGateway",
    "GitHubGateway",
    "read_text_file",
    "Hypersonic",
    "commit_message_for",
    "generate_branch_name",
    "parse_pr_number",
]
