"""
Dependabot compatibility score lookup
"""

import logging
import re
from typing import Optional

import requests

from .cache import FileCache, QueryKind
from .models import CompatibilityScore

BADGE_URL = "https://dependabot-badges.githubapp.com/badges/compatibility_score"
SCORE_PATTERN = re.compile(r'(\d{1,3})%')
UNKNOWN = "unknown"
REQUEST_TIMEOUT = 30


class CompatibilityScorer:
    """Fetches upgrade compatibility percentages from the badge service."""

    def __init__(self, cache: FileCache, session: Optional[requests.Session] = None):
        self.cache = cache
        self.session = session or requests.Session()
        self.logger = logging.getLogger(__name__)

    def score(self, repo: str, current: str, latest: str) -> CompatibilityScore:
        cached = self.cache.get(QueryKind.COMPATIBILITY, repo, current, latest)
        if cached is not None:
            return self._from_cache(cached)

        params = {
            "dependency-name": repo,
            "package-manager": "github_actions",
            "previous-version": current,
            "new-version": latest,
        }
        try:
            response = self.session.get(BADGE_URL, params=params, timeout=REQUEST_TIMEOUT)
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            self.logger.info(f"Compatibility badge for {repo} {current} -> {latest} unavailable: {e}")
            return CompatibilityScore()

        match = SCORE_PATTERN.search(response.text)
        value = int(match.group(1)) if match else None
        self.cache.set(QueryKind.COMPATIBILITY, repo, current, latest,
                       value=str(value) if value is not None else UNKNOWN)
        return CompatibilityScore(value)

    @staticmethod
    def _from_cache(cached: str) -> CompatibilityScore:
        if cached.isdigit():
            return CompatibilityScore(int(cached))
        return CompatibilityScore()
