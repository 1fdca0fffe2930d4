#!/usr/bin/env python3

"""
GitHub CLI Client Utility
-------------------------
This utility provides a GitHubCLIClient class that reads pull request data through
the GitHub CLI (gh). It implements the same `get_pull_request` operation as the
REST API client, so the target branch scripts can use either one.

When doing manual testing, you can run the same gh commands directly in the terminal.
These commands will be output by the debug logging in debug mode.

Requirements:
    - GitHub CLI (`gh`) must be installed and authenticated.
    - NOTE: GH_TOKEN environment variable hands authentication token to the CLI in a runner.
    - The repository must be accessible to the authenticated user.
"""

import subprocess
import json
import logging
from typing import List
from pull_request import PullRequestSnapshot, labels_from_payload

logger = logging.getLogger(__name__)

class GitHubCLIClient:

    def __init__(self) -> None:
        """Initialize the GitHub CLI client."""
        if not self._gh_available():
            raise EnvironmentError("GitHub CLI (`gh`) is not installed or not in PATH.")

    def _gh_available(self) -> bool:
        """Check if GitHub CLI is available."""
        try:
            subprocess.run(["gh", "--version"], check=True, stdout=subprocess.DEVNULL)
            return True
        except (subprocess.CalledProcessError, FileNotFoundError):
            return False

    def _run_gh_command(self, args: List[str]) -> subprocess.CompletedProcess:
        """Run a `gh` CLI command and return the result."""
        cmd = ["gh"] + args
        logger.debug(f"Running command: {' '.join(cmd)}")
        result = subprocess.run(cmd, capture_output=True, text=True)
        if result.returncode != 0:
            logger.error(f"Command failed: {' '.join(cmd)}\n{result.stderr.strip()}")
            raise subprocess.CalledProcessError(result.returncode, cmd, result.stdout, result.stderr)
        return result

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> PullRequestSnapshot:
        """Fetch the labels and base branch of a pull request using `gh` CLI."""
        result = self._run_gh_command(
            ["pr", "view", str(pr_number), "--repo", f"{owner}/{repo}", "--json", "number,labels,baseRefName"]
        )
        data = json.loads(result.stdout)
        labels = labels_from_payload(data.get("labels", []), pr_number)
        base_ref = data["baseRefName"]
        logger.debug(f"PR #{pr_number} in {owner}/{repo}: labels={labels} base={base_ref}")
        return PullRequestSnapshot(pr_number, labels, base_ref)
