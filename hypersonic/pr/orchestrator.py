"""Pull request orchestration.

A Hypersonic client turns a change set and a sparse pull request config into
the full sequence of remote operations:

    resolve base branch -> create working branch -> upsert each file
        -> open pull request -> labels? -> reviewers? -> auto-merge?

Every failure surfaces as a HypersonicError naming the failed step. Nothing is
retried or rolled back: if a later step fails, the working branch and any
files already committed stay in place.
"""

import logging
import re
import time
import uuid
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, Mapping, Optional, Sequence, Type, Union

from pydantic import ValidationError as PydanticValidationError

from ..config.resolver import ConfigInput, explicit_fields, resolve_pr_config
from ..config.schema import ClientConfig, PullRequestConfig
from ..errors import (
    ConfigurationError,
    GatewayError,
    HypersonicError,
    LocalIOError,
    ProtocolError,
    ValidationError,
)
from ..utils.git import GitHandler
from .files import read_text_file
from .gateway import RepositoryGateway
from .github import GitHubGateway

logger = logging.getLogger(__name__)

PR_URL_PATTERN = re.compile(r"/pull/(\d+)$")


def commit_message_for(path: str, content: str, explicit: Optional[str] = None) -> str:
    """Commit message for one file: explicit if given, else derived."""
    if explicit:
        return explicit
    return f"Delete {path}" if content == "" else f"Update {path}"


def parse_pr_number(pr_url: str) -> int:
    """Extract the pull request number from a pull request URL.

    Raises:
        ProtocolError: If the URL does not end in /pull/<number>
    """
    match = PR_URL_PATTERN.search(pr_url or "")
    if not match:
        raise ProtocolError(f"Invalid PR reference format: {pr_url!r}", operation="parse pull request number")
    return int(match.group(1))


def generate_branch_name(prefix: str = "update") -> str:
    """Working branch name, unique per call."""
    return f"{prefix}-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"


@contextmanager
def _step(operation: str, error_cls: Type[HypersonicError] = GatewayError) -> Iterator[None]:
    """Run one orchestration step, wrapping foreign exceptions.

    Library errors keep their kind and get the step recorded on them; anything
    else is wrapped in ``error_cls`` with the original as cause.
    """
    try:
        yield
    except HypersonicError as e:
        if e.operation is None:
            e.operation = operation
        raise
    except Exception as e:
        message = f"Failed to {operation}: {e}"
        if issubclass(error_cls, GatewayError):
            raise GatewayError(message, status=getattr(e, "status", None), operation=operation, cause=e) from e
        raise error_cls(message, operation=operation, cause=e) from e


class Hypersonic:
    """Create GitHub pull requests from content or local files.

    Usage:
        client = Hypersonic(os.environ["GITHUB_TOKEN"])
        url = client.create_pr_from_content(
            "owner/repo", "hello", "docs/hello.txt", title="Add greeting"
        )

    Per-call settings are given either as a ``config`` object (or mapping) or
    as keyword overrides, not both.
    """

    def __init__(
        self,
        config: Union[ClientConfig, Mapping[str, Any], str],
        gateway: Optional[RepositoryGateway] = None,
        file_reader: Callable[[str], str] = read_text_file,
        git: Optional[GitHandler] = None,
    ):
        """Initialize the client.

        Args:
            config: A bare GitHub token, a ClientConfig, or a mapping of its fields
            gateway: Repository gateway (defaults to a GitHubGateway for the config)
            file_reader: Reads local files for the file-based operations
            git: Local git helper (defaults to one scoped to the config)

        Raises:
            ConfigurationError: If the token is missing or the config is invalid
        """
        if isinstance(config, str):
            if not config.strip():
                raise ConfigurationError("GitHub token is required")
            config = ClientConfig(github_token=config)
        elif not isinstance(config, ClientConfig):
            try:
                config = ClientConfig(**dict(config))
            except (PydanticValidationError, TypeError, ValueError) as e:
                raise ConfigurationError(f"Invalid client config: {e}", cause=e) from e

        self.config = config
        # Instance layer captured once; later edits to any config object don't reach it
        self._default_layer = explicit_fields(config.default_pr_config)
        self.gateway = gateway or GitHubGateway(config.github_token, config.base_url)
        self.file_reader = file_reader
        self.git = git or GitHandler(config.github_token, config.base_url)

    def resolve_config(self, config: Optional[ConfigInput] = None, **overrides: Any) -> PullRequestConfig:
        """Resolve the pull request config for one call."""
        return resolve_pr_config(self._default_layer, config, overrides)

    def create_pr_from_content(
        self,
        repo: str,
        content: str,
        path: str,
        config: Optional[ConfigInput] = None,
        **overrides: Any,
    ) -> str:
        """Create a pull request that writes ``content`` to ``path``.

        Returns:
            URL of the created pull request
        """
        return self._create_pr(repo, {path: content}, config, overrides)

    def create_pr_from_multiple_contents(
        self,
        repo: str,
        contents: Mapping[str, str],
        config: Optional[ConfigInput] = None,
        **overrides: Any,
    ) -> str:
        """Create a pull request from a path -> content mapping.

        Files are written in the mapping's iteration order.

        Raises:
            ValidationError: If ``contents`` is empty
        """
        if not contents:
            raise ValidationError("No files provided")
        return self._create_pr(repo, dict(contents), config, overrides)

    def create_pr_from_file(
        self,
        repo: str,
        local_path: str,
        remote_path: str,
        config: Optional[ConfigInput] = None,
        **overrides: Any,
    ) -> str:
        """Create a pull request writing a local file to ``remote_path``.

        Raises:
            LocalIOError: If the local file cannot be read
        """
        with _step(f"read {local_path}", LocalIOError):
            content = self.file_reader(local_path)
        return self._create_pr(repo, {remote_path: content}, config, overrides)

    def create_pr_from_files(
        self,
        repo: str,
        files: Mapping[str, str],
        config: Optional[ConfigInput] = None,
        **overrides: Any,
    ) -> str:
        """Create a pull request from a local path -> remote path mapping.

        Every file is read before anything is sent to GitHub.

        Raises:
            ValidationError: If ``files`` is empty
            LocalIOError: If any local file cannot be read
        """
        if not files:
            raise ValidationError("No files provided")

        contents: Dict[str, str] = {}
        for local_path, remote_path in files.items():
            with _step(f"read {local_path}", LocalIOError):
                contents[remote_path] = self.file_reader(local_path)

        return self._create_pr(repo, contents, config, overrides)

    def get_file_content(self, repo: str, path: str, ref: Optional[str] = None) -> str:
        """Return the content of a file in a remote repository."""
        with _step("get file content"):
            return self.gateway.get_file_content(repo, path, ref)

    def get_local_diff(self, path: str, files: Optional[Sequence[str]] = None) -> str:
        """Return the local working tree diff against HEAD."""
        return self.git.get_local_diff(path, files)

    def apply_diff(self, repo: str, branch: str, diff_content: str) -> None:
        """Apply a diff to a remote branch through a temporary clone."""
        self.git.apply_diff(repo, branch, diff_content)

    def _create_pr(
        self,
        repo: str,
        contents: Dict[str, str],
        config: Optional[ConfigInput],
        overrides: Mapping[str, Any],
    ) -> str:
        pr_config = resolve_pr_config(self._default_layer, config, overrides)

        logger.info("Creating pull request in %s with %d file(s)", repo, len(contents))

        with _step("resolve base branch"):
            if "base_branch" in pr_config.model_fields_set:
                base_branch = pr_config.base_branch
            else:
                base_branch = self.gateway.get_default_branch(repo)

        branch_name = generate_branch_name()
        with _step("create branch"):
            self.gateway.create_branch(repo, branch_name, base_branch)
        logger.debug("Working branch %s created from %s", branch_name, base_branch)

        for index, (path, content) in enumerate(contents.items(), start=1):
            message = commit_message_for(path, content, pr_config.commit_message)
            with _step(f"update file {path}"):
                self.gateway.upsert_file(repo, path, content, message, branch_name)
            logger.debug("Committed %s (%d/%d): %s", path, index, len(contents), message)

        with _step("create pull request"):
            pr_url = self.gateway.create_pull_request(
                repo,
                pr_config.title,
                pr_config.description or "",
                branch_name,
                base_branch,
                pr_config.draft,
            )

        self._apply_extras(repo, pr_url, pr_config)

        logger.info("Created pull request %s", pr_url)
        return pr_url

    def _apply_extras(self, repo: str, pr_url: str, pr_config: PullRequestConfig) -> None:
        """Attach labels, reviewers and auto-merge, in that order."""
        pr_number = parse_pr_number(pr_url)

        if pr_config.labels:
            with _step("add labels"):
                self.gateway.add_labels(repo, pr_number, pr_config.labels)

        if pr_config.reviewers or pr_config.team_reviewers:
            with _step("add reviewers"):
                self.gateway.add_reviewers(repo, pr_number, pr_config.reviewers, pr_config.team_reviewers)

        if pr_config.auto_merge:
            with _step("enable auto-merge"):
                self.gateway.enable_auto_merge(repo, pr_number, pr_config.merge_strategy)
