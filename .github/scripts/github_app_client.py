#!/usr/bin/env python3

"""
GitHub App Client Utility
--------------------------
This utility authenticates against GitHub as a GitHub App and hands out
repository-scoped installation tokens to the GitHub API client.

Installation tokens are cached per repository until shortly before GitHub's
`expires_at`, so repeated reads of the same repository exchange the app JWT
only once. The JWT itself is regenerated when it is close to expiring.

Requirements:
    - GitHub App credentials (App ID, private key) must be available via secrets passed in the env.
    - A GitHub App installation must be present on the repository being queried.
"""

import os
import jwt
import requests
from datetime import datetime, timedelta, timezone
from time import time
from typing import Dict, Tuple
import logging

logger = logging.getLogger(__name__)

JWT_LIFETIME_SECONDS = 10 * 60
EXPIRY_MARGIN = timedelta(minutes=1)

class GitHubAppClient:

    def __init__(self, api_url: str = "https://api.github.com") -> None:
        """Initialize the GitHub App client for authentication."""
        self.app_id = os.environ.get("APP_ID")
        self.private_key = os.environ.get("APP_PRIVATE_KEY")
        if not self.private_key or not self.app_id:
            raise RuntimeError("Environment variables missing for GitHub App usage.")
        self.api_url = api_url
        self._jwt = ""
        self._jwt_expires_at = 0
        self._installation_tokens: Dict[str, Tuple[str, datetime]] = {}

    def _app_jwt(self) -> str:
        """Return a JWT for the app, generating a new one when the current one is near expiry."""
        now = int(time())
        if not self._jwt or now >= self._jwt_expires_at - EXPIRY_MARGIN.total_seconds():
            self._jwt_expires_at = now + JWT_LIFETIME_SECONDS
            payload = {"iat": now, "exp": self._jwt_expires_at, "iss": self.app_id}
            self._jwt = jwt.encode(payload, self.private_key, algorithm="RS256")
            logger.debug(f"Generated GitHub App JWT for app {self.app_id}")
        return self._jwt

    def _app_request(self, method: str, path: str, error_msg: str) -> dict:
        """Call an app-level endpoint authenticated with the app JWT."""
        headers = {
            "Authorization": f"Bearer {self._app_jwt()}",
            "Accept": "application/vnd.github+json",
        }
        response = requests.request(method, f"{self.api_url}{path}", headers=headers)
        if not response.ok:
            raise RuntimeError(f"{error_msg}: {response.status_code} {response.text}")
        return response.json()

    def get_access_token_for_repo(self, repo_full_name: str) -> str:
        """Return an installation access token for the repository, reusing a cached one while valid."""
        cached = self._installation_tokens.get(repo_full_name)
        if cached and datetime.now(timezone.utc) < cached[1] - EXPIRY_MARGIN:
            return cached[0]
        installation = self._app_request("GET", f"/repos/{repo_full_name}/installation",
                                         f"Failed to get installation for {repo_full_name}")
        logger.debug(f"Installation ID for {repo_full_name}: {installation['id']}")
        data = self._app_request("POST", f"/app/installations/{installation['id']}/access_tokens",
                                 f"Failed to get token for {repo_full_name}")
        expires_at = datetime.fromisoformat(data["expires_at"].replace("Z", "+00:00"))
        self._installation_tokens[repo_full_name] = (data["token"], expires_at)
        return data["token"]

    def get_authenticated_headers_for_repo(self, repo_full_name: str) -> dict:
        """Return headers with installation access token for a specific repository."""
        return {
            "Authorization": f"token {self.get_access_token_for_repo(repo_full_name)}",
            "Accept": "application/vnd.github+json",
        }
