"""
Utility functions for action-drift
"""

import logging
import shutil
import sys
from pathlib import Path
from typing import List, Sequence

REQUIRED_TOOLS = ("git",)


def setup_logging(verbosity: int) -> None:
    """Set up logging based on verbosity level."""
    if verbosity == 0:
        level = logging.WARNING
    elif verbosity == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    # Configure logging format
    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    if verbosity >= 2:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"

    logging.basicConfig(
        level=level,
        format=log_format,
        handlers=[
            logging.StreamHandler(sys.stderr)
        ],
        force=True,
    )

    # Reduce noise from external libraries
    if verbosity < 3:
        logging.getLogger("urllib3").setLevel(logging.WARNING)
        logging.getLogger("requests").setLevel(logging.WARNING)


def find_workflow_files(directory: Path) -> List[Path]:
    """Find the workflow files directly inside ``directory``, sorted by name."""
    if not directory.is_dir():
        return []

    workflow_files = []
    for ext in ["yml", "yaml"]:
        workflow_files.extend(p for p in directory.glob(f"*.{ext}") if p.is_file())

    return sorted(set(workflow_files))


def missing_tools(tools: Sequence[str] = REQUIRED_TOOLS) -> List[str]:
    """Return the required executables that are not on PATH."""
    return [tool for tool in tools if shutil.which(tool) is None]
