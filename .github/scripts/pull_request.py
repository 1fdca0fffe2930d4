#!/usr/bin/env python3

"""
Pull Request Snapshot
---------------------
The pull request data the target branch scripts read from GitHub, and the
interface both GitHub clients implement to fetch it.
"""

import logging
from dataclasses import dataclass
from typing import List, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

@dataclass(frozen=True)
class PullRequestSnapshot:
    number: int             # pull request number
    labels: List[str]       # label names applied to the pull request
    base_ref: str           # branch targeted in the GitHub UI

@runtime_checkable
class PullRequestClient(Protocol):

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> PullRequestSnapshot:
        ...

def labels_from_payload(labels_data: list, pr_number: int) -> List[str]:
    """Extract label names, skipping entries without a name."""
    # The REST API schema marks label names as optional even though GitHub always sets them.
    labels = []
    for label in labels_data:
        name = label.get("name")
        if not name:
            logger.warning(f"Skipping label without a name on PR #{pr_number}: {label}")
            continue
        labels.append(name)
    return labels
