"""
Outdated-reference detection
"""

import re
from typing import Optional

from .models import ActionReference, Finding, PinKind

VERSION_PREFIX_PATTERN = re.compile(r'^v?(\d+(?:\.\d+){0,2})')


def version_prefix(text: str) -> str:
    """Return the ``major[.minor[.patch]]`` prefix of a version, or ``""``.

    >>> version_prefix("v4.1.0-beta")
    '4.1.0'
    """
    match = VERSION_PREFIX_PATTERN.match(text.strip())
    return match.group(1) if match else ""


def major_of(version: str) -> str:
    return version.split('.', 1)[0]


def compare(
    reference: ActionReference,
    latest: str,
    ahead_count: Optional[int] = None,
    target_sha: Optional[str] = None,
) -> Optional[Finding]:
    """Decide whether ``reference`` is outdated relative to ``latest``.

    ``latest`` is the latest release tag (or default branch name). For SHA
    pins the decision rests on ``ahead_count`` alone: a positive count is
    outdated, zero or None is not. Major pins only compare the major number.
    Other pins compare numeric prefixes as strings, so any difference counts,
    including a pin that is ahead of the latest release.
    """
    kind = reference.kind

    if kind is PinKind.SHA:
        if not ahead_count or ahead_count <= 0:
            return None
        return Finding(
            reference=reference,
            current_version=reference.pinned_version,
            latest_version=latest,
            latest_tag=latest,
            ahead_count=ahead_count,
            target_sha=target_sha,
        )

    if kind not in (PinKind.MAJOR, PinKind.SEMVER):
        return None

    current = version_prefix(reference.pinned_version)
    latest_prefix = version_prefix(latest)
    if not current or not latest_prefix:
        return None

    if kind is PinKind.MAJOR:
        outdated = major_of(latest_prefix) != current
    else:
        outdated = latest_prefix != current

    if not outdated:
        return None

    return Finding(
        reference=reference,
        current_version=current,
        latest_version=latest_prefix,
        latest_tag=latest,
    )
