#!/usr/bin/env python3

"""
GitHub API Client
-----------------
Provides the GitHub REST API operations used by the target branch scripts.

This includes:
- Fetching a pull request's labels and base branch as a `PullRequestSnapshot`

Authentication, in order of preference:
    APP_ID and APP_PRIVATE_KEY environment variables (GitHub App installation token)
    GH_TOKEN or GITHUB_TOKEN environment variable (automatically available in GitHub Actions)
    no credentials (public repositories only, low rate limit)
"""

import os
import requests
import logging
from typing import Optional
from github_app_client import GitHubAppClient
from pull_request import PullRequestSnapshot, labels_from_payload

logger = logging.getLogger(__name__)

class GitHubAPIError(RuntimeError):
    """Raised when the GitHub API returns a non-successful response."""

class GitHubAPIClient:

    def __init__(self, api_url: str = "https://api.github.com", token: Optional[str] = None,
                 session: Optional[requests.Session] = None) -> None:
        """Initialize the GitHub API client, using GitHub App authentication when configured."""
        self.api_url = api_url
        self.session = session or requests.Session()
        self.token = token or os.environ.get("GH_TOKEN") or os.environ.get("GITHUB_TOKEN")
        self.github_app_client = None
        if not token and os.environ.get("APP_ID") and os.environ.get("APP_PRIVATE_KEY"):
            self.github_app_client = GitHubAppClient()

    def _headers(self, repo_full_name: str) -> dict:
        """Return the request headers for the given repository."""
        if self.github_app_client:
            return self.github_app_client.get_authenticated_headers_for_repo(repo_full_name)
        headers = {"Accept": "application/vnd.github+json"}
        if self.token:
            headers["Authorization"] = f"token {self.token}"
        return headers

    def _get_json(self, url: str, repo_full_name: str, error_msg: str) -> dict:
        """Perform a GET request and return the JSON response, raising on failure."""
        response = self.session.get(url, headers=self._headers(repo_full_name))
        if not response.ok:
            logger.error(f"{error_msg}: {response.status_code} {response.text}")
            raise GitHubAPIError(f"{error_msg}: {response.status_code}")
        return response.json()

    def get_pull_request(self, owner: str, repo: str, pr_number: int) -> PullRequestSnapshot:
        """Fetch the labels and base branch of a pull request."""
        repo_full_name = f"{owner}/{repo}"
        url = f"{self.api_url}/repos/{repo_full_name}/pulls/{pr_number}"
        data = self._get_json(url, repo_full_name, f"Failed to fetch PR #{pr_number} in {repo_full_name}")
        labels = labels_from_payload(data["labels"], pr_number)
        base_ref = data["base"]["ref"]
        logger.debug(f"PR #{pr_number} in {repo_full_name}: labels={labels} base={base_ref}")
        return PullRequestSnapshot(pr_number, labels, base_ref)
