import argparse
import json
import logging
import subprocess
import sys
from pathlib import Path
from typing import List, Optional

import requests

from .cache import FileCache
from .comparator import compare
from .compatibility import CompatibilityScorer
from .config import DEFAULT_WORKFLOW_DIR, RunConfig
from .git_client import GitClient
from .github_api import GitHubAPI
from .models import ActionReference, Finding, PinKind
from .reporter import Reporter
from .resolver import DEFAULT_BRANCH_DETAIL, VersionResolver
from .updater import Updater
from .utils import setup_logging, find_workflow_files, missing_tools
from .workflow_parser import WorkflowParser

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create and configure the argument parser."""
    parser = argparse.ArgumentParser(
        prog="action-drift",
        description="Report outdated GitHub Actions and optionally open update pull requests",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s
  %(prog)s -v
  %(prog)s -u
  %(prog)s -u -p --github-token "$GITHUB_TOKEN"
        """
    )

    # Action options
    parser.add_argument(
        "--update", "-u",
        action="store_true",
        help="Create a branch and commit for each outdated version pin"
    )
    parser.add_argument(
        "--push", "-p",
        action="store_true",
        help="Push update branches and open pull requests (requires -u)"
    )

    # Input options
    parser.add_argument(
        "--workflow-dir",
        type=Path,
        default=DEFAULT_WORKFLOW_DIR,
        help="Directory containing workflow files (default: %(default)s)"
    )

    # Output options
    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Also write findings to this file (JSON format)"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        default=0,
        help="Increase verbosity (use -v or -vv)"
    )

    # GitHub API options
    parser.add_argument(
        "--github-token",
        help="GitHub API token (or set GITHUB_TOKEN environment variable)"
    )

    return parser


def check_reference(
    reference: ActionReference,
    resolver: VersionResolver,
    scorer: CompatibilityScorer,
) -> Optional[Finding]:
    """Resolve, compare and score a single action reference."""
    kind = reference.kind

    if kind is PinKind.INTERNAL:
        logger.info(f"{reference.location}: skipping internal action {reference.repo_path}")
        return None
    if kind.is_skipped:
        logger.debug(f"{reference.location}: skipping {kind.value} reference {reference}")
        return None

    repo = reference.repo
    latest = resolver.latest_version(repo)
    if not latest.ok:
        logger.info(f"{reference.location}: cannot determine latest version of {repo} ({latest.detail})")
        return None

    if kind is PinKind.SHA:
        target = resolver.commit_sha(repo, latest.value)
        if not target.ok:
            logger.info(f"{reference.location}: cannot resolve {repo}@{latest.value} ({target.detail})")
            return None
        ahead = resolver.ahead_count(repo, reference.pinned_version, target.value)
        if ahead is None:
            logger.info(f"{reference.location}: ahead-count unavailable for {repo}, treating as up to date")
        return compare(reference, latest.value, ahead_count=ahead, target_sha=target.value)

    if latest.detail == DEFAULT_BRANCH_DETAIL:
        logger.info(f"{reference.location}: {repo} has no releases (default branch {latest.value})")
        return None

    finding = compare(reference, latest.value)
    if finding is None:
        logger.debug(f"{reference.location}: {reference} is up to date")
        return None

    finding.compatibility_score = scorer.score(
        repo, finding.current_version, finding.latest_version
    )
    return finding


def apply_updates(updater: Updater, file_findings: List[Finding]) -> None:
    """Apply one update per distinct version pin of a single workflow file.

    A rewrite replaces every occurrence of a pin in the file, so repeated
    pins of the same action and version are applied once.
    """
    applied = set()
    for finding in file_findings:
        if finding.is_sha_finding:
            continue
        key = (finding.reference.repo_path, finding.current_version, finding.target_version)
        if key in applied:
            logger.debug(f"{finding.reference.location}: already updated with an earlier step")
            continue
        applied.add(key)
        updater.apply(finding)


def process_workflows(
    workflow_files: List[Path],
    resolver: VersionResolver,
    scorer: CompatibilityScorer,
    reporter: Reporter,
    updater: Optional[Updater] = None,
) -> List[Finding]:
    """Scan workflow files in order, reporting findings file by file."""
    parser = WorkflowParser()
    findings = []

    for workflow_file in workflow_files:
        logger.info(f"Processing workflow file: {workflow_file}")
        references = parser.parse_workflow(workflow_file)

        file_findings = []
        for reference in references:
            finding = check_reference(reference, resolver, scorer)
            if finding is not None:
                reporter.add(finding)
                file_findings.append(finding)

        reporter.flush(workflow_file)

        if updater is not None:
            apply_updates(updater, file_findings)

        findings.extend(file_findings)

    return findings


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    # Setup logging
    setup_logging(args.verbose)

    config = RunConfig.from_args(args)
    try:
        config.validate()
    except ValueError as e:
        logger.error(str(e))
        return 1

    missing = missing_tools()
    if missing:
        logger.error(f"Required tool(s) not found in PATH: {', '.join(missing)}")
        return 1

    workflow_files = find_workflow_files(config.workflow_dir)
    logger.info(f"Found {len(workflow_files)} workflow file(s) in {config.workflow_dir}")

    cache = FileCache(config.cache_dir)
    github_api = GitHubAPI(token=config.github_token)
    git_client = GitClient()
    resolver = VersionResolver(github_api, git_client, cache)
    scorer = CompatibilityScorer(cache)
    reporter = Reporter()
    updater = Updater(git_client, github_api, push=config.push) if config.update else None

    try:
        findings = process_workflows(workflow_files, resolver, scorer, reporter, updater)
    except subprocess.CalledProcessError as e:
        logger.error(f"Command failed: {' '.join(e.cmd)}: {(e.stderr or '').strip()}")
        return e.returncode
    except (requests.exceptions.RequestException, RuntimeError, OSError) as e:
        logger.error(f"Update failed: {e}")
        return 1

    if config.output:
        with open(config.output, 'w') as f:
            json.dump([finding.to_dict() for finding in findings], f, indent=2)
        logger.info(f"Results saved to {config.output}")

    reporter.summary(len(workflow_files))
    return 0


if __name__ == "__main__":
    sys.exit(main())
