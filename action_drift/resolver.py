"""
Version resolution with on-disk caching
"""

import logging
from typing import Optional

from .cache import FileCache, QueryKind
from .git_client import GitClient
from .github_api import GitHubAPI
from .models import Lookup, LookupStatus

DEFAULT_BRANCH_DETAIL = "default-branch"


class VersionResolver:
    """Resolves latest versions, commit SHAs and ahead-counts through the cache."""

    def __init__(self, github_api: GitHubAPI, git_client: GitClient, cache: FileCache):
        self.github_api = github_api
        self.git_client = git_client
        self.cache = cache
        self.logger = logging.getLogger(__name__)

    def _cached_lookup(self, kind: QueryKind, fetch, *params: str) -> Lookup:
        cached = self.cache.get(kind, *params)
        if cached is not None:
            return Lookup.found(cached)

        result = fetch(*params)
        if result.ok:
            self.cache.set(kind, *params, value=result.value)
        return result

    def latest_version(self, repo: str) -> Lookup:
        """Latest release tag of ``repo``, falling back to its default branch.

        A fallback result carries ``detail == "default-branch"``.
        """
        release = self._cached_lookup(QueryKind.LATEST_RELEASE, self.github_api.get_latest_release, repo)
        if release.status is not LookupStatus.NO_DATA:
            return release

        self.logger.debug(f"{repo} has no releases, using its default branch")
        branch = self._cached_lookup(QueryKind.DEFAULT_BRANCH, self.github_api.get_default_branch, repo)
        if branch.ok:
            return Lookup.found(branch.value, DEFAULT_BRANCH_DETAIL)
        return branch

    def commit_sha(self, repo: str, ref: str) -> Lookup:
        """Commit SHA that ``ref`` currently points to."""
        return self._cached_lookup(QueryKind.COMMIT_SHA, self.github_api.get_commit_sha, repo, ref)

    def ahead_count(self, repo: str, current_sha: str, target_sha: str) -> Optional[int]:
        """Number of commits in ``target_sha`` that ``current_sha`` lacks."""
        if current_sha.lower() == target_sha.lower():
            return 0

        cached = self.cache.get(QueryKind.AHEAD_COUNT, repo, current_sha, target_sha)
        if cached is not None:
            try:
                return int(cached)
            except ValueError:
                self.logger.debug(f"Ignoring malformed cached ahead-count for {repo}: {cached!r}")

        count = self.git_client.ahead_count(repo, current_sha, target_sha)
        if count is not None:
            self.cache.set(QueryKind.AHEAD_COUNT, repo, current_sha, target_sha, value=str(count))
        return count
