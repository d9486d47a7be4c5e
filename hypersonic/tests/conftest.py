"""Shared fixtures for hypersonic tests."""

from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest

from hypersonic.config.schema import MergeStrategy
from hypersonic.errors import GatewayError
from hypersonic.pr import Hypersonic, RepositoryGateway


class FakeGateway(RepositoryGateway):
    """In-memory gateway that records every call in order.

    Set ``fail_on`` to an operation name to make that call raise, and
    ``pr_url`` to control what create_pull_request returns.
    """

    def __init__(
        self,
        default_branch: str = "main",
        pr_url: str = "https://github.com/owner/repo/pull/42",
        fail_on: Optional[str] = None,
        failure: Optional[Exception] = None,
    ):
        self.default_branch = default_branch
        self.pr_url = pr_url
        self.fail_on = fail_on
        self.failure = failure
        self.calls: List[Tuple[str, Tuple[Any, ...]]] = []
        self.files: Dict[str, str] = {}

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if name == self.fail_on:
            raise self.failure or GatewayError(f"Failed to {name}: boom", status=500, operation=name)

    @property
    def call_names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def get_default_branch(self, repo: str) -> str:
        self._record("get_default_branch", repo)
        return self.default_branch

    def create_branch(self, repo: str, branch: str, base_branch: str) -> None:
        self._record("create_branch", repo, branch, base_branch)

    def get_file_content(self, repo: str, path: str, ref: Optional[str] = None) -> str:
        self._record("get_file_content", repo, path, ref)
        return self.files.get(path, "")

    def upsert_file(self, repo: str, path: str, content: str, commit_message: str, branch: str) -> None:
        self._record("upsert_file", repo, path, content, commit_message, branch)
        self.files[path] = content

    def create_pull_request(
        self,
        repo: str,
        title: str,
        body: str,
        head_branch: str,
        base_branch: str,
        draft: bool = False,
    ) -> str:
        self._record("create_pull_request", repo, title, body, head_branch, base_branch, draft)
        return self.pr_url

    def add_labels(self, repo: str, pr_number: int, labels: Sequence[str]) -> None:
        self._record("add_labels", repo, pr_number, list(labels))

    def add_reviewers(
        self,
        repo: str,
        pr_number: int,
        reviewers: Sequence[str],
        team_reviewers: Sequence[str] = (),
    ) -> None:
        self._record("add_reviewers", repo, pr_number, list(reviewers), list(team_reviewers))

    def enable_auto_merge(self, repo: str, pr_number: int, merge_strategy: MergeStrategy) -> None:
        self._record("enable_auto_merge", repo, pr_number, merge_strategy)


class RecordingReader:
    """File reader backed by a dict that records which paths were read."""

    def __init__(self, files: Optional[Dict[str, str]] = None):
        self.files = files or {}
        self.reads: List[str] = []

    def __call__(self, local_path: str) -> str:
        self.reads.append(local_path)
        if local_path not in self.files:
            raise FileNotFoundError(f"No such file: {local_path}")
        return self.files[local_path]


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def reader():
    return RecordingReader()


@pytest.fixture
def client(gateway, reader):
    return Hypersonic("t", gateway=gateway, file_reader=reader)


@pytest.fixture
def make_gateway():
    """Factory for gateways configured per test."""
    return FakeGateway


@pytest.fixture
def make_reader():
    """Factory for readers backed by a given set of files."""
    return RecordingReader
