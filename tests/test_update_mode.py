import io
import shutil
import subprocess
from unittest.mock import Mock

import pytest

from action_drift.cli import process_workflows
from action_drift.git_client import GitClient
from action_drift.models import CompatibilityScore, Lookup
from action_drift.reporter import Reporter
from action_drift.updater import Updater

pytestmark = pytest.mark.skipif(shutil.which("git") is None, reason="git is not installed")

CI = """on: push
jobs:
  build:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v2
  test:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v2
      - uses: actions/setup-node@v3.8.1
"""

DEPLOY = """on: push
jobs:
  deploy:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v2
"""

LATEST = {"actions/checkout": "v4", "actions/setup-node": "v4.0.2"}


def git(repo, *args):
    return subprocess.run(
        ["git", *args], cwd=repo, check=True, capture_output=True, text=True
    ).stdout


@pytest.fixture
def repo(tmp_path):
    git(tmp_path, "init", "-q")
    git(tmp_path, "checkout", "-q", "-b", "trunk")
    git(tmp_path, "config", "user.email", "dev@example.com")
    git(tmp_path, "config", "user.name", "Dev")
    git(tmp_path, "config", "commit.gpgsign", "false")

    workflows = tmp_path / ".github" / "workflows"
    workflows.mkdir(parents=True)
    (workflows / "ci.yml").write_text(CI)
    (workflows / "deploy.yml").write_text(DEPLOY)

    git(tmp_path, "add", ".")
    git(tmp_path, "commit", "-q", "-m", "initial")
    return tmp_path


def make_resolver():
    resolver = Mock()
    resolver.latest_version.side_effect = lambda repo: Lookup.found(LATEST[repo])
    return resolver


def make_scorer():
    scorer = Mock()
    scorer.score.return_value = CompatibilityScore(90)
    return scorer


def run_update(repo):
    workflows = repo / ".github" / "workflows"
    files = [workflows / "ci.yml", workflows / "deploy.yml"]
    updater = Updater(GitClient(cwd=repo))
    return process_workflows(files, make_resolver(), make_scorer(), Reporter(io.StringIO(), color=False), updater)


class TestUpdateMode:
    def test_repeated_pins_within_and_across_files(self, repo):
        findings = run_update(repo)

        assert len(findings) == 4
        branches = git(repo, "branch", "--list", "action-drift/*", "--format=%(refname:short)").split()
        assert sorted(branches) == [
            "action-drift/ci.yml/actions-checkout-v4",
            "action-drift/ci.yml/actions-setup-node-v4.0.2",
            "action-drift/deploy.yml/actions-checkout-v4",
        ]

        ci = git(repo, "show", "action-drift/ci.yml/actions-checkout-v4:.github/workflows/ci.yml")
        assert ci.count("actions/checkout@v4") == 2
        assert "actions/checkout@v2" not in ci
        assert "actions/setup-node@v3.8.1" in ci

        deploy = git(repo, "show", "action-drift/deploy.yml/actions-checkout-v4:.github/workflows/deploy.yml")
        assert "actions/checkout@v4" in deploy

        log = git(repo, "log", "--format=%s", "action-drift/ci.yml/actions-checkout-v4")
        assert log.splitlines() == ["Update actions/checkout to v4", "initial"]

    def test_returns_to_starting_branch_with_clean_tree(self, repo):
        run_update(repo)

        assert git(repo, "rev-parse", "--abbrev-ref", "HEAD").strip() == "trunk"
        assert git(repo, "status", "--porcelain") == ""
        assert "actions/checkout@v2" in (repo / ".github" / "workflows" / "ci.yml").read_text()

    def test_second_run_keeps_existing_branches(self, repo):
        run_update(repo)
        before = git(repo, "rev-parse", "action-drift/ci.yml/actions-checkout-v4")

        run_update(repo)

        assert git(repo, "rev-parse", "action-drift/ci.yml/actions-checkout-v4") == before
        assert git(repo, "status", "--porcelain") == ""
