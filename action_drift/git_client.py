"""
Git command-line integration module
"""

import subprocess
import tempfile
import shutil
import logging
import re
from pathlib import Path
from typing import List, Optional


class GitClient:
    """Thin wrapper over the ``git`` executable."""

    def __init__(self, cwd: Optional[Path] = None):
        self.logger = logging.getLogger(__name__)
        self.cwd = cwd
        self.git_path = self._find_git()

    def _find_git(self) -> Optional[str]:
        """Find the git executable."""
        git_path = shutil.which("git")
        if git_path:
            self.logger.debug(f"Found git at: {git_path}")
        return git_path

    def run(self, *args: str, cwd: Optional[Path] = None, check: bool = True) -> subprocess.CompletedProcess:
        """Run a git command and capture its output."""
        cmd = [self.git_path or "git", *args]
        self.logger.debug(f"Running: {' '.join(cmd)}")
        return subprocess.run(
            cmd,
            cwd=cwd or self.cwd,
            capture_output=True,
            text=True,
            check=check,
        )

    def ahead_count(self, repo: str, pinned_sha: str, target_sha: str) -> Optional[int]:
        """Count commits reachable from ``target_sha`` but not from ``pinned_sha``.

        Clones ``repo`` without blobs into a scratch directory and fetches the
        pinned commit explicitly, since it may not be on any branch. Returns
        None when the clone, the fetch or the count fails.
        """
        repo_url = f"https://github.com/{repo}.git"

        with tempfile.TemporaryDirectory(prefix="action-drift-") as temp_dir:
            repo_path = Path(temp_dir) / "repo"

            clone = self.run(
                "clone", "--bare", "--filter=blob:none", "--quiet", repo_url, str(repo_path),
                check=False,
            )
            if clone.returncode != 0:
                self.logger.info(f"Clone of {repo} failed: {clone.stderr.strip()}")
                return None

            for sha in (pinned_sha, target_sha):
                fetch = self.run("fetch", "--quiet", "origin", sha, cwd=repo_path, check=False)
                if fetch.returncode != 0:
                    self.logger.debug(f"Fetch of {repo}@{sha} failed: {fetch.stderr.strip()}")

            count = self.run(
                "rev-list", "--count", f"{pinned_sha}..{target_sha}",
                cwd=repo_path, check=False,
            )
            if count.returncode != 0:
                self.logger.info(f"Cannot count commits {pinned_sha[:7]}..{target_sha[:7]} "
                                 f"in {repo}: {count.stderr.strip()}")
                return None

        try:
            return int(count.stdout.strip())
        except ValueError:
            return None

    def current_branch(self) -> str:
        return self.run("rev-parse", "--abbrev-ref", "HEAD").stdout.strip()

    def branch_exists(self, name: str) -> bool:
        result = self.run("rev-parse", "--verify", "--quiet", f"refs/heads/{name}", check=False)
        return result.returncode == 0

    def create_branch(self, name: str) -> None:
        self.run("checkout", "-b", name)

    def checkout(self, name: str) -> None:
        self.run("checkout", name)

    def add(self, paths: List[Path]) -> None:
        self.run("add", "--", *[str(p) for p in paths])

    def commit(self, message: str) -> None:
        self.run("commit", "--quiet", "-m", message)

    def push(self, branch: str, remote: str = "origin") -> None:
        self.run("push", "--quiet", "--set-upstream", remote, branch)

    def remote_repo(self, remote: str = "origin") -> Optional[str]:
        """Return ``owner/repo`` parsed from a GitHub remote URL."""
        result = self.run("remote", "get-url", remote, check=False)
        if result.returncode != 0:
            return None
        return parse_github_remote(result.stdout.strip())


def parse_github_remote(url: str) -> Optional[str]:
    """Extract ``owner/repo`` from an https or ssh GitHub remote URL."""
    match = re.search(r'github\.com[:/]([^/]+)/([^/]+?)(?:\.git)?/?$', url)
    if not match:
        return None
    return f"{match.group(1)}/{match.group(2)}"
