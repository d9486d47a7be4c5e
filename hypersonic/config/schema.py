"""Pull request and client configuration schema definitions."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_BASE_URL = "https://api.github.com"


class MergeStrategy(str, Enum):
    """Merge method used when auto-merge is enabled."""

    MERGE = "merge"
    SQUASH = "squash"
    REBASE = "rebase"


class PullRequestConfig(BaseModel):
    """How a pull request should be created.

    Every field carries its built-in default, so an instance that only sets a
    few fields doubles as a partial layer: the fields the caller actually set
    are recorded in ``model_fields_set`` and are the only ones that take part
    in layered resolution.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    title: str = Field("Automated changes", description="Pull request title")
    description: Optional[str] = Field(None, description="Pull request body")
    base_branch: str = Field("main", description="Branch the pull request targets")
    draft: bool = Field(False, description="Open the pull request as a draft")
    labels: List[str] = Field(default_factory=list, description="Labels to attach")
    reviewers: List[str] = Field(default_factory=list, description="User logins to request reviews from")
    team_reviewers: List[str] = Field(default_factory=list, description="Team slugs to request reviews from")
    merge_strategy: MergeStrategy = Field(MergeStrategy.SQUASH, description="Merge method for auto-merge")
    delete_branch_on_merge: bool = Field(True, description="Delete the working branch once merged")
    auto_merge: bool = Field(False, description="Enable auto-merge after creation")
    commit_message: Optional[str] = Field(
        None,
        description="Commit message for every file; derived per file when unset",
    )


DEFAULT_PR_CONFIG = PullRequestConfig()


class ClientConfig(BaseModel):
    """Process-scoped configuration for one Hypersonic client."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    github_token: str = Field(description="GitHub token used for every request")
    base_url: str = Field(DEFAULT_BASE_URL, description="GitHub API base URL")
    app_name: Optional[str] = Field(None, description="Informational application name")
    default_pr_config: PullRequestConfig = Field(
        default_factory=PullRequestConfig,
        description="Instance-level pull request defaults",
    )

    @field_validator("github_token")
    @classmethod
    def _token_not_empty(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("GitHub token is required")
        return value.strip()

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("default_pr_config")
    @classmethod
    def _own_pr_defaults(cls, value: PullRequestConfig) -> PullRequestConfig:
        # Detach from the caller's object and its lists
        return value.model_copy(deep=True)
