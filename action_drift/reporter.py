"""
Console reporting of findings
"""

import os
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .models import Finding

STYLE = {
    "positive": "\033[1;92m",
    "negative": "\033[1;31m",
    "unknown": "\033[2m",
    "repo": "\033[1m",
    "sha": "\033[33m",
    "underline": "\033[4m",
    "end": "\033[0m",
}


def use_color(stream: TextIO) -> bool:
    """Colours only for interactive terminals and only without NO_COLOR."""
    if os.getenv("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class Reporter:
    """Collects findings per workflow file and prints them file by file."""

    def __init__(self, stream: Optional[TextIO] = None, color: Optional[bool] = None):
        self.stream = stream or sys.stdout
        self.color = use_color(self.stream) if color is None else color
        self._pending: List[str] = []
        self.findings: List[Finding] = []
        self.files_with_findings = 0

    def _style(self, name: str, text: str) -> str:
        if not self.color:
            return text
        return f"{STYLE[name]}{text}{STYLE['end']}"

    def format_badge(self, finding: Finding) -> str:
        score = finding.compatibility_score
        if score is None:
            return ""
        return self._style(score.badge, f"[compatibility: {score}]")

    def format_finding(self, finding: Finding) -> str:
        ref = finding.reference
        repo = self._style("repo", ref.repo_path)

        if finding.is_sha_finding:
            current = self._style("sha", finding.current_version[:7])
            target = (finding.target_sha or "")[:7]
            noun = "commit" if finding.ahead_count == 1 else "commits"
            return (f"  line {ref.line_number}  {repo}  {current} is "
                    f"{finding.ahead_count} {noun} behind {finding.latest_tag} ({target})")

        parts = [f"  line {ref.line_number}  {repo}  "
                 f"{finding.current_version} -> {finding.latest_version}"]
        badge = self.format_badge(finding)
        if badge:
            parts.append(badge)
        parts.append(finding.release_url)
        return "  ".join(parts)

    def format_file_header(self, path: Path) -> str:
        return "\n" + self._style("underline", str(path))

    def add(self, finding: Finding) -> None:
        """Record a finding for the file currently being scanned."""
        self.findings.append(finding)
        self._pending.append(self.format_finding(finding))

    def flush(self, path: Path) -> None:
        """Print the findings gathered for ``path``, if there are any."""
        if not self._pending:
            return
        print(self.format_file_header(path), file=self.stream)
        for line in self._pending:
            print(line, file=self.stream)
        self.files_with_findings += 1
        self._pending = []

    def summary(self, files_scanned: int) -> None:
        print(f"\nSummary:", file=self.stream)
        print(f"  Workflow files scanned: {files_scanned}", file=self.stream)
        print(f"  Outdated actions: {len(self.findings)}", file=self.stream)
        if self.findings:
            print(f"  Files with outdated actions: {self.files_with_findings}", file=self.stream)
