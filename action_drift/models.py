"""
Data models for action-drift
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional
import re


SHA_PATTERN = re.compile(r'^[0-9a-fA-F]{40}$')
MAJOR_PATTERN = re.compile(r'^v?\d+$')
PROTECTED_BRANCHES = ("main", "master")

POSITIVE_SCORE_THRESHOLD = 80


class PinKind(Enum):
    """How an action reference is pinned."""

    DOCKER = "docker"
    LOCAL = "local"
    INVALID = "invalid"
    INTERNAL = "internal"
    BRANCH = "branch"
    SHA = "sha"
    MAJOR = "major"
    SEMVER = "semver"

    @property
    def is_skipped(self) -> bool:
        return self in (PinKind.DOCKER, PinKind.LOCAL, PinKind.INVALID,
                        PinKind.INTERNAL, PinKind.BRANCH)


class LookupStatus(Enum):
    FOUND = "found"
    NO_DATA = "no_data"
    FAILED = "failed"


@dataclass
class Lookup:
    """Result of a remote lookup.

    ``NO_DATA`` means the remote answered but has nothing for the query
    (for example a repository without releases); ``FAILED`` means the
    request itself did not succeed.
    """

    status: LookupStatus
    value: Optional[str] = None
    detail: str = ""

    @classmethod
    def found(cls, value: str, detail: str = "") -> "Lookup":
        return cls(LookupStatus.FOUND, value, detail)

    @classmethod
    def no_data(cls, detail: str = "") -> "Lookup":
        return cls(LookupStatus.NO_DATA, None, detail)

    @classmethod
    def failed(cls, detail: str = "") -> "Lookup":
        return cls(LookupStatus.FAILED, None, detail)

    @property
    def ok(self) -> bool:
        return self.status is LookupStatus.FOUND


@dataclass
class ActionReference:
    """Represents a ``uses:`` reference found in a workflow step."""

    uses: str
    source_file: Path
    line_number: int

    @property
    def repo_path(self) -> str:
        """The part before ``@`` (``owner/repo`` or ``owner/repo/sub/dir``)."""
        return self.uses.split('@', 1)[0]

    @property
    def pinned_version(self) -> str:
        """The part after ``@``; empty if the reference is unpinned."""
        if '@' not in self.uses:
            return ""
        return self.uses.split('@', 1)[1]

    @property
    def repo(self) -> str:
        """``owner/repo`` of the hosting repository."""
        return '/'.join(self.repo_path.split('/')[:2])

    @property
    def location(self) -> str:
        return f"{self.source_file}:{self.line_number}"

    @property
    def kind(self) -> PinKind:
        # Handle different action formats:
        # - docker://alpine:3.19
        # - ./local-action
        # - org/private/path/action@v1
        # - actions/checkout@main
        # - actions/checkout@<40 hex>
        # - actions/checkout@v4
        # - actions/checkout@v4.1.1
        if self.uses.startswith('docker://'):
            return PinKind.DOCKER

        if self.uses.startswith('./') or self.uses.startswith('../'):
            return PinKind.LOCAL

        if '@' not in self.uses or not self.pinned_version:
            return PinKind.INVALID

        segments = [part for part in self.repo_path.split('/') if part]
        if len(segments) < 2:
            return PinKind.INVALID
        if len(segments) > 2:
            return PinKind.INTERNAL

        ref = self.pinned_version
        if ref in PROTECTED_BRANCHES:
            return PinKind.BRANCH
        if SHA_PATTERN.match(ref):
            return PinKind.SHA
        if MAJOR_PATTERN.match(ref):
            return PinKind.MAJOR
        return PinKind.SEMVER

    def __str__(self) -> str:
        return self.uses


@dataclass
class CompatibilityScore:
    """Compatibility percentage reported by the badge service."""

    value: Optional[int] = None

    @property
    def badge(self) -> str:
        if self.value is None:
            return "unknown"
        if self.value >= POSITIVE_SCORE_THRESHOLD:
            return "positive"
        return "negative"

    def __str__(self) -> str:
        if self.value is None:
            return "Unknown"
        return f"{self.value}%"


@dataclass
class Finding:
    """An outdated action reference."""

    reference: ActionReference
    current_version: str
    latest_version: str
    latest_tag: str
    compatibility_score: Optional[CompatibilityScore] = None
    ahead_count: Optional[int] = None
    target_sha: Optional[str] = None

    @property
    def is_sha_finding(self) -> bool:
        return self.reference.kind is PinKind.SHA

    @property
    def target_version(self) -> str:
        """Version to write back: major pins stay major-only."""
        if self.reference.kind is PinKind.MAJOR:
            return self.latest_version.split('.', 1)[0]
        return self.latest_version

    @property
    def release_url(self) -> str:
        return f"https://github.com/{self.reference.repo}/releases/tag/{self.latest_tag}"

    def to_dict(self) -> dict:
        """Convert finding to dictionary format."""
        return {
            "file": str(self.reference.source_file),
            "line": self.reference.line_number,
            "action": self.reference.repo_path,
            "current_version": self.current_version,
            "latest_version": self.latest_version,
            "latest_tag": self.latest_tag,
            "compatibility_score": (
                self.compatibility_score.value if self.compatibility_score else None
            ),
            "ahead_count": self.ahead_count,
            "target_sha": self.target_sha,
        }
