"""
Base gateway class for remote repository operations.

The orchestrator only talks to a RepositoryGateway; GitHubGateway is the
PyGithub-backed implementation. Implementations raise GatewayError for any
remote failure.

Repositories are identified by "owner/name" strings.
"""

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from ..config.schema import MergeStrategy


class RepositoryGateway(ABC):
    """Abstract base class for hosted repository operations."""

    @abstractmethod
    def get_default_branch(self, repo: str) -> str:
        """Return the repository's default branch name."""
        pass

    @abstractmethod
    def create_branch(self, repo: str, branch: str, base_branch: str) -> None:
        """Create ``branch`` pointing at the head of ``base_branch``."""
        pass

    @abstractmethod
    def get_file_content(self, repo: str, path: str, ref: Optional[str] = None) -> str:
        """Return the decoded text content of a file."""
        pass

    @abstractmethod
    def upsert_file(
        self,
        repo: str,
        path: str,
        content: str,
        commit_message: str,
        branch: str,
    ) -> None:
        """Create the file, or update it if it already exists on ``branch``."""
        pass

    @abstractmethod
    def create_pull_request(
        self,
        repo: str,
        title: str,
        body: str,
        head_branch: str,
        base_branch: str,
        draft: bool = False,
    ) -> str:
        """Open a pull request and return its URL."""
        pass

    @abstractmethod
    def add_labels(self, repo: str, pr_number: int, labels: Sequence[str]) -> None:
        """Attach labels to a pull request."""
        pass

    @abstractmethod
    def add_reviewers(
        self,
        repo: str,
        pr_number: int,
        reviewers: Sequence[str],
        team_reviewers: Sequence[str] = (),
    ) -> None:
        """Request reviews from users and teams."""
        pass

    @abstractmethod
    def enable_auto_merge(self, repo: str, pr_number: int, merge_strategy: MergeStrategy) -> None:
        """Enable auto-merge with the given merge method."""
        pass
