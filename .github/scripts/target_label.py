#!/usr/bin/env python3

"""
Target Label Resolution
-----------------------
Maps the labels on a pull request to the single configured target label and
expands that label's branch rule into the ordered list of branches the pull
request should be merged into.

A branch rule names a primary branch (either fixed or the branch selected in
the GitHub UI) and any additional branches the change must also land in.
Branch entries may be references resolved against static configuration:

    {main}    the repository's main branch
    {base}    the branch targeted in the GitHub UI
    {next}    merge.releaseBranches.next
    {latest}  merge.releaseBranches.latest
    {lts}     every branch in merge.releaseBranches.lts, in order
"""

import enum
import logging
from dataclasses import dataclass
from fnmatch import fnmatch
from typing import Iterable, List, Optional
from target_config_model import BranchRule, MergeConfig, ReleaseBranches

logger = logging.getLogger(__name__)

class InvalidTargetLabelError(Exception):
    """Raised when a pull request's labels do not resolve to a usable target label."""

    class Kind(enum.Enum):
        NOT_FOUND = "not_found"
        AMBIGUOUS = "ambiguous"
        INVALID_BASE_BRANCH = "invalid_base_branch"

    def __init__(self, kind: "InvalidTargetLabelError.Kind", failure_message: str,
                 labels: Iterable[str] = ()) -> None:
        super().__init__(failure_message)
        self.kind = kind
        self.failure_message = failure_message
        self.labels = tuple(labels)

class BranchConfigError(Exception):
    """Raised when a branch rule cannot be resolved from the static configuration."""

@dataclass(frozen=True)
class TargetLabel:
    name: str           # label string as applied on GitHub
    rule: BranchRule    # branch targeting policy for the label

def resolve_target_label(merge_config: MergeConfig, labels: Iterable[str]) -> TargetLabel:
    """Return the one configured target label present in `labels`."""
    present = set(labels)
    matches = [
        TargetLabel(name, rule)
        for name, rule in sorted(merge_config.target_labels.items())
        if name in present
    ]
    if not matches:
        raise InvalidTargetLabelError(
            InvalidTargetLabelError.Kind.NOT_FOUND,
            "Unable to determine target for the PR as it has no target label.",
        )
    if len(matches) > 1:
        names = [match.name for match in matches]
        raise InvalidTargetLabelError(
            InvalidTargetLabelError.Kind.AMBIGUOUS,
            f"Unable to determine target for the PR as it has multiple target labels: {', '.join(names)}",
            names,
        )
    logger.debug(f"Resolved target label: {matches[0].name}")
    return matches[0]

def _expand_reference(branch: str, github_target_branch: str, main_branch_name: str,
                      release_branches: Optional[ReleaseBranches]) -> List[str]:
    """Expand a single branch entry, which may be a `{reference}`, into branch names."""
    if not (branch.startswith("{") and branch.endswith("}")):
        return [branch]
    reference = branch[1:-1]
    if reference == "main":
        return [main_branch_name]
    if reference == "base":
        return [github_target_branch]
    if reference not in ("next", "latest", "lts"):
        raise BranchConfigError(f"Unknown branch reference '{branch}'.")
    if release_branches is None:
        raise BranchConfigError(f"Branch reference '{branch}' requires 'merge.releaseBranches' to be configured.")
    if reference == "lts":
        if not release_branches.lts:
            raise BranchConfigError("Branch reference '{lts}' requires at least one 'merge.releaseBranches.lts' entry.")
        return list(release_branches.lts)
    resolved = getattr(release_branches, reference)
    if not resolved:
        raise BranchConfigError(f"Branch reference '{branch}' requires 'merge.releaseBranches.{reference}' to be configured.")
    return [resolved]

def get_branches_from_target_label(target_label: TargetLabel, github_target_branch: str,
                                   main_branch_name: str = "main",
                                   release_branches: Optional[ReleaseBranches] = None) -> List[str]:
    """Expand the target label's branch rule into an ordered, de-duplicated branch list."""
    rule = target_label.rule
    if rule.allowed_base_branches and not any(
        fnmatch(github_target_branch, pattern) for pattern in rule.allowed_base_branches
    ):
        raise InvalidTargetLabelError(
            InvalidTargetLabelError.Kind.INVALID_BASE_BRANCH,
            f"PRs with the \"{target_label.name}\" label cannot target \"{github_target_branch}\". "
            f"Allowed base branches: {', '.join(rule.allowed_base_branches)}",
            [target_label.name],
        )
    if rule.branch:
        candidates = _expand_reference(rule.branch, github_target_branch, main_branch_name, release_branches)
    else:
        candidates = [github_target_branch]
    for entry in rule.also_merge_into:
        candidates.extend(_expand_reference(entry, github_target_branch, main_branch_name, release_branches))
    branches: List[str] = []
    for branch in candidates:
        if branch not in branches:
            branches.append(branch)
    logger.debug(f"Branches for target label '{target_label.name}': {branches}")
    return branches
