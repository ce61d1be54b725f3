"""
GitHub API integration module
"""

import requests
import time
import logging
import os
from typing import Optional
from urllib.parse import urljoin

from .models import Lookup

REQUEST_TIMEOUT = 30


class GitHubAPI:
    """GitHub API client for resolving action versions and opening pull requests."""

    def __init__(self, token: Optional[str] = None, base_url: str = "https://api.github.com/"):
        self.token = token or os.getenv("GITHUB_TOKEN")
        self.base_url = base_url
        self.session = requests.Session()
        self.logger = logging.getLogger(__name__)

        self.session.headers.update({"Accept": "application/vnd.github+json"})

        # Set up authentication
        if self.token:
            self.session.headers.update({"Authorization": f"token {self.token}"})
        else:
            self.logger.warning("No GitHub token provided. API rate limits will be lower.")

        # Rate limiting
        self.rate_limit_remaining = None
        self.rate_limit_reset = None

    def _make_request(self, endpoint: str, method: str = "GET", **kwargs) -> requests.Response:
        """Make a request to the GitHub API with rate limiting."""
        url = urljoin(self.base_url, endpoint.lstrip('/'))
        kwargs.setdefault("timeout", REQUEST_TIMEOUT)

        # Check rate limit
        self._check_rate_limit()

        response = self.session.request(method, url, **kwargs)

        # Update rate limit info
        remaining = response.headers.get('X-RateLimit-Remaining')
        reset = response.headers.get('X-RateLimit-Reset')
        if remaining is not None:
            self.rate_limit_remaining = int(remaining)
        if reset is not None:
            self.rate_limit_reset = int(reset)

        response.raise_for_status()
        return response

    def _check_rate_limit(self) -> None:
        """Check and handle rate limiting."""
        if self.rate_limit_remaining is not None and self.rate_limit_remaining < 10:
            if self.rate_limit_reset:
                wait_time = max(0, self.rate_limit_reset - int(time.time()) + 1)
                if wait_time > 0:
                    self.logger.warning(f"Rate limit approaching. Waiting {wait_time} seconds...")
                    time.sleep(wait_time)

    def _lookup(self, endpoint: str, field: str) -> Lookup:
        """GET an endpoint and pull a single string field out of its JSON body."""
        try:
            response = self._make_request(endpoint)
            data = response.json()
        except requests.exceptions.HTTPError as e:
            if e.response is not None and e.response.status_code == 404:
                return Lookup.no_data(f"{endpoint}: not found")
            return Lookup.failed(f"{endpoint}: {e}")
        except (requests.exceptions.RequestException, ValueError) as e:
            return Lookup.failed(f"{endpoint}: {e}")

        value = data.get(field) if isinstance(data, dict) else None
        if not value:
            return Lookup.no_data(f"{endpoint}: empty '{field}'")
        return Lookup.found(str(value))

    def get_latest_release(self, repo: str) -> Lookup:
        """Get the tag name of the latest release of ``owner/repo``."""
        result = self._lookup(f"/repos/{repo}/releases/latest", "tag_name")
        self.logger.debug(f"Latest release of {repo}: {result}")
        return result

    def get_default_branch(self, repo: str) -> Lookup:
        """Get the default branch name of ``owner/repo``."""
        result = self._lookup(f"/repos/{repo}", "default_branch")
        self.logger.debug(f"Default branch of {repo}: {result}")
        return result

    def get_commit_sha(self, repo: str, ref: str) -> Lookup:
        """Resolve a tag, branch or commit-ish to a full commit SHA."""
        result = self._lookup(f"/repos/{repo}/commits/{ref}", "sha")
        self.logger.debug(f"Resolved {repo}@{ref}: {result}")
        return result

    def create_pull_request(self, repo: str, head: str, base: str, title: str, body: str) -> str:
        """Open a pull request and return its URL.

        Errors are not translated; a failed request raises ``requests.HTTPError``.
        """
        response = self._make_request(
            f"/repos/{repo}/pulls",
            method="POST",
            json={"title": title, "head": head, "base": base, "body": body},
        )
        url = response.json().get("html_url", "")
        self.logger.info(f"Opened pull request {url}")
        return url
