import subprocess
from unittest.mock import patch

import pytest

from action_drift.git_client import GitClient, parse_github_remote


def completed(returncode=0, stdout="", stderr=""):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


@pytest.fixture
def git():
    with patch("action_drift.git_client.shutil.which", return_value="/usr/bin/git"):
        yield GitClient()


class TestAheadCount:
    def test_counts_commits(self, git):
        with patch("action_drift.git_client.subprocess.run") as run:
            run.side_effect = [completed(), completed(), completed(), completed(stdout="7\n")]

            assert git.ahead_count("actions/checkout", "a" * 40, "b" * 40) == 7

        commands = [call.args[0] for call in run.call_args_list]
        assert commands[0][:3] == ["/usr/bin/git", "clone", "--bare"]
        assert "https://github.com/actions/checkout.git" in commands[0]
        assert commands[1][1:] == ["fetch", "--quiet", "origin", "a" * 40]
        assert commands[3][1:] == ["rev-list", "--count", f"{'a' * 40}..{'b' * 40}"]

    def test_clone_failure(self, git):
        with patch("action_drift.git_client.subprocess.run") as run:
            run.return_value = completed(returncode=128, stderr="not found")

            assert git.ahead_count("octo/gone", "a" * 40, "b" * 40) is None
            assert run.call_count == 1

    def test_unknown_commit(self, git):
        with patch("action_drift.git_client.subprocess.run") as run:
            run.side_effect = [
                completed(),
                completed(returncode=1, stderr="no such commit"),
                completed(),
                completed(returncode=128, stderr="bad revision"),
            ]

            assert git.ahead_count("actions/checkout", "a" * 40, "b" * 40) is None


class TestCommands:
    def test_commit_raises_on_failure(self, git):
        with patch("action_drift.git_client.subprocess.run") as run:
            run.side_effect = subprocess.CalledProcessError(1, ["git", "commit"])
            with pytest.raises(subprocess.CalledProcessError):
                git.commit("message")


class TestParseGithubRemote:
    @pytest.mark.parametrize(
        "url, repo",
        [
            ("https://github.com/octo/proj.git", "octo/proj"),
            ("https://github.com/octo/proj", "octo/proj"),
            ("git@github.com:octo/proj.git", "octo/proj"),
            ("https://gitlab.com/octo/proj.git", None),
        ],
    )
    def test_parse(self, url, repo):
        assert parse_github_remote(url) == repo
