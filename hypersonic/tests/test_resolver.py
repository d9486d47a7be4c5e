"""Tests for layered pull request config resolution."""

import pytest

from hypersonic.config import DEFAULT_PR_CONFIG, MergeStrategy, PullRequestConfig, resolve_pr_config
from hypersonic.config.resolver import explicit_fields
from hypersonic.errors import ConfigurationError

# field -> (instance value, call value); both differ from the built-in default
FIELD_VALUES = {
    "title": ("Instance title", "Call title"),
    "description": ("Instance body", "Call body"),
    "base_branch": ("develop", "release"),
    "draft": (True, False),
    "labels": (["automated"], ["bug"]),
    "reviewers": (["alice"], ["bob"]),
    "team_reviewers": (["core"], ["docs"]),
    "merge_strategy": (MergeStrategy.REBASE, MergeStrategy.MERGE),
    "delete_branch_on_merge": (False, True),
    "auto_merge": (True, False),
    "commit_message": ("Instance commit", "Call commit"),
}


class TestBuiltInDefaults:
    """Test the built-in default layer."""

    def test_defaults_when_nothing_given(self):
        resolved = resolve_pr_config()
        assert resolved.title == "Automated changes"
        assert resolved.description is None
        assert resolved.base_branch == "main"
        assert resolved.draft is False
        assert resolved.labels == []
        assert resolved.reviewers == []
        assert resolved.team_reviewers == []
        assert resolved.merge_strategy == MergeStrategy.SQUASH
        assert resolved.delete_branch_on_merge is True
        assert resolved.auto_merge is False
        assert resolved.commit_message is None

    def test_only_title_keeps_other_defaults(self):
        resolved = resolve_pr_config(config={"title": "Test PR"})
        expected = DEFAULT_PR_CONFIG.model_dump()
        expected["title"] = "Test PR"
        assert resolved.model_dump() == expected

    def test_nothing_explicit_when_nothing_given(self):
        assert resolve_pr_config().model_fields_set == set()


class TestPrecedence:
    """Call > instance > built-in, checked one field at a time."""

    @pytest.mark.parametrize("field", sorted(FIELD_VALUES))
    def test_call_beats_instance(self, field):
        instance_value, call_value = FIELD_VALUES[field]
        resolved = resolve_pr_config(
            PullRequestConfig(**{field: instance_value}),
            overrides={field: call_value},
        )
        assert getattr(resolved, field) == call_value

    @pytest.mark.parametrize("field", sorted(FIELD_VALUES))
    def test_instance_beats_builtin(self, field):
        instance_value, _ = FIELD_VALUES[field]
        resolved = resolve_pr_config(PullRequestConfig(**{field: instance_value}))
        assert getattr(resolved, field) == instance_value

    @pytest.mark.parametrize("field", sorted(FIELD_VALUES))
    def test_call_beats_builtin(self, field):
        _, call_value = FIELD_VALUES[field]
        resolved = resolve_pr_config(config=PullRequestConfig(**{field: call_value}))
        assert getattr(resolved, field) == call_value

    @pytest.mark.parametrize("field", sorted(FIELD_VALUES))
    def test_builtin_when_no_layer_sets_field(self, field):
        other = "title" if field != "title" else "draft"
        resolved = resolve_pr_config(
            PullRequestConfig(**{other: FIELD_VALUES[other][0]}),
            overrides={other: FIELD_VALUES[other][1]},
        )
        assert getattr(resolved, field) == getattr(DEFAULT_PR_CONFIG, field)

    def test_partial_call_falls_through_per_field(self):
        instance = PullRequestConfig(
            title="Instance Default",
            base_branch="develop",
            labels=["automated"],
            merge_strategy=MergeStrategy.REBASE,
        )
        resolved = resolve_pr_config(instance, config={"title": "Custom"})
        assert resolved.title == "Custom"
        assert resolved.base_branch == "develop"
        assert resolved.labels == ["automated"]
        assert resolved.merge_strategy == MergeStrategy.REBASE
        assert resolved.draft is False

    def test_explicit_fields_tracked(self):
        resolved = resolve_pr_config(
            PullRequestConfig(base_branch="develop"),
            overrides={"title": "T"},
        )
        assert resolved.model_fields_set == {"base_branch", "title"}

    def test_explicit_value_equal_to_default_still_counts(self):
        resolved = resolve_pr_config(
            PullRequestConfig(base_branch="develop"),
            overrides={"base_branch": "main"},
        )
        assert resolved.base_branch == "main"
        assert "base_branch" in resolved.model_fields_set


class TestInputShapes:
    """Test the full-config vs discrete-overrides rule."""

    def test_both_shapes_rejected(self):
        with pytest.raises(ConfigurationError, match="cannot provide both"):
            resolve_pr_config(config=PullRequestConfig(title="A"), overrides={"title": "B"})

    def test_both_shapes_rejected_even_when_empty_config(self):
        with pytest.raises(ConfigurationError):
            resolve_pr_config(config={}, overrides={"draft": True})

    def test_empty_overrides_with_config_allowed(self):
        resolved = resolve_pr_config(config={"title": "A"}, overrides={})
        assert resolved.title == "A"

    def test_unknown_field_rejected(self):
        with pytest.raises(ConfigurationError, match="Invalid pull request config"):
            resolve_pr_config(overrides={"titel": "typo"})

    def test_bad_merge_strategy_rejected(self):
        with pytest.raises(ConfigurationError):
            resolve_pr_config(config={"merge_strategy": "octopus"})

    def test_merge_strategy_from_string(self):
        resolved = resolve_pr_config(config={"merge_strategy": "rebase"})
        assert resolved.merge_strategy is MergeStrategy.REBASE


class TestIsolation:
    """Resolution never shares or mutates the instance defaults."""

    def test_instance_lists_not_shared(self):
        instance = PullRequestConfig(labels=["automated"])
        resolved = resolve_pr_config(instance)
        resolved.labels.append("mutated")
        assert instance.labels == ["automated"]

    def test_call_lists_not_shared(self):
        labels = ["bug"]
        resolved = resolve_pr_config(overrides={"labels": labels})
        resolved.labels.append("mutated")
        assert labels == ["bug"]

    def test_fresh_object_each_call(self):
        instance = PullRequestConfig(reviewers=["alice"])
        first = resolve_pr_config(instance)
        second = resolve_pr_config(instance)
        assert first is not second
        assert first.reviewers is not second.reviewers

    def test_builtin_defaults_untouched(self):
        resolved = resolve_pr_config()
        resolved.labels.append("x")
        assert DEFAULT_PR_CONFIG.labels == []

    def test_explicit_fields_of_none(self):
        assert explicit_fields(None) == {}
