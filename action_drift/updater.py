"""
Update branches, commits and pull requests for outdated actions
"""

import logging
import re
from pathlib import Path
from typing import Optional

from .git_client import GitClient
from .github_api import GitHubAPI
from .models import Finding

BASE_BRANCH = "main"
BRANCH_PREFIX = "action-drift"


def _slug(text: str) -> str:
    return re.sub(r'[^A-Za-z0-9._-]+', '-', text).strip('.-')


def branch_name(finding: Finding) -> str:
    """Branch name derived from the workflow file, the action repo and the target version."""
    ref = finding.reference
    return (f"{BRANCH_PREFIX}/{_slug(ref.source_file.name)}/"
            f"{_slug(ref.repo_path)}-v{finding.target_version}")


def rewrite(path: Path, repo_path: str, current: str, latest: str) -> int:
    """Replace ``repo@[v]current`` with ``repo@[v]latest`` in ``path``.

    The ``v`` prefix of each occurrence is preserved. A pre-release or build
    suffix (``-rc.1``, ``+build``) belongs to the old pin and is replaced along
    with it. A match must not be followed by another version character, so
    ``@v2`` does not match inside ``@v2.1``. Returns the number of replacements.
    """
    pattern = re.compile(
        rf'(?P<lead>{re.escape(repo_path)}@)(?P<v>v?){re.escape(current)}'
        r'(?:[-+][\w.+-]*)?(?![\w.])'
    )
    content = path.read_text(encoding='utf-8')
    new_content, count = pattern.subn(lambda m: f"{m.group('lead')}{m.group('v')}{latest}", content)
    if count:
        path.write_text(new_content, encoding='utf-8')
    return count


class Updater:
    """Creates one branch and commit per outdated action, optionally with a PR.

    Nothing is rolled back: a failing git or API call propagates and leaves
    any branch and commit already made in place.
    """

    def __init__(self, git_client: GitClient, github_api: Optional[GitHubAPI] = None,
                 push: bool = False, base_branch: str = BASE_BRANCH):
        if push and github_api is None:
            raise ValueError("Push mode needs a GitHub API client to open pull requests")
        self.git = git_client
        self.github_api = github_api
        self.push = push
        self.base_branch = base_branch
        self.logger = logging.getLogger(__name__)

    def commit_message(self, finding: Finding) -> str:
        return f"Update {finding.reference.repo_path} to v{finding.target_version}"

    def pull_request_body(self, finding: Finding) -> str:
        ref = finding.reference
        lines = [
            f"Updates `{ref.repo_path}` from `{finding.current_version}` to "
            f"`{finding.target_version}` in `{ref.source_file}`.",
            "",
            f"Release notes: {finding.release_url}",
        ]
        if finding.compatibility_score is not None:
            lines.append(f"Compatibility score: {finding.compatibility_score}")
        return "\n".join(lines)

    def apply(self, finding: Finding) -> Optional[str]:
        """Branch, rewrite, commit and (in push mode) open a PR.

        Returns the pull request URL in push mode, otherwise None.
        """
        ref = finding.reference
        branch = branch_name(finding)
        if self.git.branch_exists(branch):
            self.logger.warning(f"Branch {branch} already exists, skipping {ref.repo_path} in {ref.source_file}")
            return None

        start = self.git.current_branch()
        self.git.create_branch(branch)
        replaced = rewrite(ref.source_file, ref.repo_path, finding.current_version, finding.target_version)
        if not replaced:
            self.logger.warning(f"No '{ref.repo_path}@v{finding.current_version}' found in {ref.source_file}")
            self.git.checkout(start)
            return None

        self.git.add([ref.source_file])
        self.git.commit(self.commit_message(finding))
        self.logger.info(f"Committed {ref.repo_path} -> v{finding.target_version} on {branch}")

        pr_url = None
        if self.push:
            self.git.push(branch)
            repo = self.git.remote_repo()
            if repo is None:
                raise RuntimeError("Cannot determine the GitHub repository of remote 'origin'")
            pr_url = self.github_api.create_pull_request(
                repo,
                head=branch,
                base=self.base_branch,
                title=self.commit_message(finding),
                body=self.pull_request_body(finding),
            )

        self.git.checkout(start)
        return pr_url
