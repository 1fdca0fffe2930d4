"""Unit tests for target label resolution and branch expansion."""

import itertools

import pytest
from pydantic import ValidationError

from target_config_model import BranchRule, MergeConfig, ReleaseBranches
from target_label import (
    BranchConfigError,
    InvalidTargetLabelError,
    TargetLabel,
    get_branches_from_target_label,
    resolve_target_label,
)


@pytest.fixture
def merge_config() -> MergeConfig:
    return MergeConfig(
        targetLabels={
            "target: major": {"branch": "{main}"},
            "target: minor": {"followBaseBranch": True, "alsoMergeInto": ["{main}"]},
            "target: patch": {"branch": "{latest}", "alsoMergeInto": ["{main}"]},
        }
    )


@pytest.fixture
def release_branches() -> ReleaseBranches:
    return ReleaseBranches(next="10.2.x", latest="10.1.x", lts=["9.2.x", "8.4.x"])


def _label(name: str, **rule) -> TargetLabel:
    return TargetLabel(name, BranchRule(**rule))


def test_resolve_single_target_label(merge_config: MergeConfig) -> None:
    """resolve_target_label returns the one configured label present on the PR."""
    label = resolve_target_label(merge_config, ["area: docs", "target: minor", "needs review"])
    assert label.name == "target: minor"
    assert label.rule.follow_base_branch is True


def test_resolve_is_independent_of_label_order(merge_config: MergeConfig) -> None:
    """Any ordering of the same labels resolves to the same target label."""
    labels = ["area: docs", "target: patch", "flaky"]
    results = {resolve_target_label(merge_config, list(p)).name for p in itertools.permutations(labels)}
    assert results == {"target: patch"}


def test_resolve_without_target_label_raises_not_found(merge_config: MergeConfig) -> None:
    """A PR with no recognized target label fails with the not-found kind."""
    with pytest.raises(InvalidTargetLabelError) as exc_info:
        resolve_target_label(merge_config, ["area: docs", "target: unknown"])
    assert exc_info.value.kind is InvalidTargetLabelError.Kind.NOT_FOUND
    assert exc_info.value.labels == ()


def test_resolve_with_empty_labels_raises_not_found(merge_config: MergeConfig) -> None:
    with pytest.raises(InvalidTargetLabelError) as exc_info:
        resolve_target_label(merge_config, [])
    assert exc_info.value.kind is InvalidTargetLabelError.Kind.NOT_FOUND


def test_resolve_multiple_target_labels_raises_ambiguous(merge_config: MergeConfig) -> None:
    """Two or more target labels fail with the ambiguous kind and name every conflict."""
    with pytest.raises(InvalidTargetLabelError) as exc_info:
        resolve_target_label(merge_config, ["target: patch", "target: major", "target: minor"])
    error = exc_info.value
    assert error.kind is InvalidTargetLabelError.Kind.AMBIGUOUS
    assert error.labels == ("target: major", "target: minor", "target: patch")
    for name in error.labels:
        assert name in error.failure_message


def test_follow_base_branch_then_main() -> None:
    """followBaseBranch puts the UI branch first, then the configured extras in order."""
    label = _label("target: minor", followBaseBranch=True, alsoMergeInto=["{main}"])
    assert get_branches_from_target_label(label, "10.1.x", main_branch_name="main") == ["10.1.x", "main"]


def test_fixed_branch_ignores_base_branch() -> None:
    label = _label("target: major", branch="main")
    assert get_branches_from_target_label(label, "10.1.x") == ["main"]


def test_duplicates_are_removed_keeping_first_position() -> None:
    """The UI branch coinciding with a configured extra branch appears only once."""
    label = _label("target: minor", followBaseBranch=True, alsoMergeInto=["{main}", "develop", "{base}"])
    assert get_branches_from_target_label(label, "main", main_branch_name="main") == ["main", "develop"]


def test_expansion_is_deterministic(release_branches: ReleaseBranches) -> None:
    label = _label("target: lts", followBaseBranch=True, alsoMergeInto=["{lts}", "{main}"])
    first = get_branches_from_target_label(label, "10.1.x", "main", release_branches)
    second = get_branches_from_target_label(label, "10.1.x", "main", release_branches)
    assert first == second == ["10.1.x", "9.2.x", "8.4.x", "main"]


def test_release_branch_references(release_branches: ReleaseBranches) -> None:
    patch_label = _label("target: patch", branch="{latest}", alsoMergeInto=["{main}"])
    rc_label = _label("target: rc", branch="{next}", alsoMergeInto=["{main}"])
    assert get_branches_from_target_label(patch_label, "main", "main", release_branches) == ["10.1.x", "main"]
    assert get_branches_from_target_label(rc_label, "main", "main", release_branches) == ["10.2.x", "main"]


def test_custom_main_branch_name() -> None:
    label = _label("target: major", branch="{main}")
    assert get_branches_from_target_label(label, "feature", main_branch_name="trunk") == ["trunk"]


def test_missing_release_branches_is_a_config_error() -> None:
    """A reference that needs release data absent from the config raises BranchConfigError."""
    label = _label("target: patch", branch="{latest}")
    with pytest.raises(BranchConfigError):
        get_branches_from_target_label(label, "main")


def test_missing_single_release_branch_is_a_config_error() -> None:
    label = _label("target: rc", branch="{next}")
    with pytest.raises(BranchConfigError, match="releaseBranches.next"):
        get_branches_from_target_label(label, "main", release_branches=ReleaseBranches(latest="10.1.x"))


def test_empty_lts_is_a_config_error() -> None:
    label = _label("target: lts", followBaseBranch=True, alsoMergeInto=["{lts}"])
    with pytest.raises(BranchConfigError):
        get_branches_from_target_label(label, "9.2.x", release_branches=ReleaseBranches(latest="10.1.x"))


def test_unknown_reference_is_a_config_error(release_branches: ReleaseBranches) -> None:
    label = _label("target: odd", branch="{previous}")
    with pytest.raises(BranchConfigError, match="Unknown branch reference"):
        get_branches_from_target_label(label, "main", release_branches=release_branches)


def test_allowed_base_branches_accepts_matching_branch() -> None:
    label = _label("target: lts", followBaseBranch=True, allowedBaseBranches=["*.x"])
    assert get_branches_from_target_label(label, "9.2.x") == ["9.2.x"]


def test_allowed_base_branches_rejects_other_branch() -> None:
    """A UI branch outside the allowed patterns fails with the invalid-base-branch kind."""
    label = _label("target: lts", followBaseBranch=True, allowedBaseBranches=["*.x"])
    with pytest.raises(InvalidTargetLabelError) as exc_info:
        get_branches_from_target_label(label, "main")
    assert exc_info.value.kind is InvalidTargetLabelError.Kind.INVALID_BASE_BRANCH
    assert "main" in exc_info.value.failure_message


def test_branch_rule_requires_exactly_one_primary_target() -> None:
    with pytest.raises(ValidationError):
        BranchRule(alsoMergeInto=["main"])
    with pytest.raises(ValidationError):
        BranchRule(branch="main", followBaseBranch=True)


def test_merge_config_requires_target_labels_when_labeling_enabled() -> None:
    with pytest.raises(ValidationError):
        MergeConfig(noTargetLabeling=False)
    assert MergeConfig(noTargetLabeling=True).target_labels == {}
