"""
Run configuration assembled from command-line arguments and the environment
"""

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .cache import default_cache_dir

DEFAULT_WORKFLOW_DIR = Path(".github") / "workflows"


@dataclass
class RunConfig:
    """Settings for a single scan."""

    workflow_dir: Path = DEFAULT_WORKFLOW_DIR
    update: bool = False
    push: bool = False
    verbosity: int = 0
    github_token: Optional[str] = None
    cache_dir: Optional[Path] = None
    output: Optional[Path] = None

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RunConfig":
        return cls(
            workflow_dir=args.workflow_dir,
            update=args.update,
            push=args.push,
            verbosity=args.verbose,
            github_token=args.github_token or os.getenv("GITHUB_TOKEN"),
            cache_dir=default_cache_dir(),
            output=args.output,
        )

    def validate(self) -> None:
        """Reject flag combinations that cannot run."""
        if self.push and not self.update:
            raise ValueError("-p/--push requires -u/--update")
