"""GitHub gateway backed by PyGithub."""

import logging
from typing import Optional, Sequence

from github import Auth, Github, GithubException
from github.Repository import Repository

from ..config.schema import DEFAULT_BASE_URL, MergeStrategy
from ..errors import GatewayError
from .gateway import RepositoryGateway

logger = logging.getLogger(__name__)


def _gateway_error(operation: str, e: GithubException) -> GatewayError:
    """Wrap a PyGithub exception, keeping the HTTP status."""
    return GatewayError(
        f"Failed to {operation}: {e}",
        status=e.status,
        operation=operation,
        cause=e,
    )


class GitHubGateway(RepositoryGateway):
    """Repository operations against the GitHub REST API.

    One gateway is scoped to one token and one API host.
    """

    def __init__(self, token: str, base_url: str = DEFAULT_BASE_URL, github: Optional[Github] = None):
        """Initialize the gateway.

        Args:
            token: GitHub personal access token
            base_url: API base URL (GitHub Enterprise uses https://host/api/v3)
            github: Pre-built PyGithub client, mainly for tests
        """
        self.base_url = base_url
        self.github = github or Github(auth=Auth.Token(token), base_url=base_url)

    def _repo(self, repo: str) -> Repository:
        return self.github.get_repo(repo)

    def get_default_branch(self, repo: str) -> str:
        try:
            return self._repo(repo).default_branch
        except GithubException as e:
            raise _gateway_error("get default branch", e) from e

    def create_branch(self, repo: str, branch: str, base_branch: str) -> None:
        try:
            gh_repo = self._repo(repo)
            base_ref = gh_repo.get_git_ref(f"heads/{base_branch}")
            gh_repo.create_git_ref(ref=f"refs/heads/{branch}", sha=base_ref.object.sha)
        except GithubException as e:
            raise _gateway_error("create branch", e) from e

        logger.debug("Created branch %s from %s in %s", branch, base_branch, repo)

    def get_file_content(self, repo: str, path: str, ref: Optional[str] = None) -> str:
        try:
            gh_repo = self._repo(repo)
            if ref:
                contents = gh_repo.get_contents(path, ref=ref)
            else:
                contents = gh_repo.get_contents(path)
        except GithubException as e:
            raise _gateway_error("get file content", e) from e

        if isinstance(contents, list):
            raise GatewayError(f"Path '{path}' points to a directory", operation="get file content")

        return contents.decoded_content.decode("utf-8")

    def upsert_file(
        self,
        repo: str,
        path: str,
        content: str,
        commit_message: str,
        branch: str,
    ) -> None:
        try:
            gh_repo = self._repo(repo)
            try:
                existing = gh_repo.get_contents(path, ref=branch)
            except GithubException as e:
                if e.status != 404:
                    raise
                # File doesn't exist, create it
                gh_repo.create_file(
                    path=path,
                    message=commit_message,
                    content=content,
                    branch=branch,
                )
                logger.debug("Created %s on %s", path, branch)
                return

            if isinstance(existing, list):
                raise GatewayError(f"Path '{path}' points to a directory", operation="update file")

            gh_repo.update_file(
                path=path,
                message=commit_message,
                content=content,
                sha=existing.sha,
                branch=branch,
            )
            logger.debug("Updated %s on %s", path, branch)
        except GithubException as e:
            raise _gateway_error("update file", e) from e

    def create_pull_request(
        self,
        repo: str,
        title: str,
        body: str,
        head_branch: str,
        base_branch: str,
        draft: bool = False,
    ) -> str:
        try:
            pr = self._repo(repo).create_pull(
                title=title,
                body=body,
                head=head_branch,
                base=base_branch,
                draft=draft,
            )
        except GithubException as e:
            raise _gateway_error("create pull request", e) from e

        return pr.html_url

    def add_labels(self, repo: str, pr_number: int, labels: Sequence[str]) -> None:
        try:
            # Pull requests share the issue API for labels
            self._repo(repo).get_issue(pr_number).add_to_labels(*labels)
        except GithubException as e:
            raise _gateway_error("add labels", e) from e

    def add_reviewers(
        self,
        repo: str,
        pr_number: int,
        reviewers: Sequence[str],
        team_reviewers: Sequence[str] = (),
    ) -> None:
        try:
            self._repo(repo).get_pull(pr_number).create_review_request(
                reviewers=list(reviewers),
                team_reviewers=list(team_reviewers),
            )
        except GithubException as e:
            raise _gateway_error("add reviewers", e) from e

    def enable_auto_merge(self, repo: str, pr_number: int, merge_strategy: MergeStrategy) -> None:
        try:
            self._repo(repo).get_pull(pr_number).enable_automerge(
                merge_method=MergeStrategy(merge_strategy).value.upper(),
            )
        except GithubException as e:
            raise _gateway_error("enable auto-merge", e) from e
