"""
GitHub Actions workflow parser module
"""

import yaml
from pathlib import Path
from typing import List, Optional, Tuple
import logging

from .models import ActionReference


def _mapping_get(node: yaml.Node, key: str) -> Optional[yaml.Node]:
    """Look up a key in a YAML mapping node."""
    if not isinstance(node, yaml.MappingNode):
        return None
    for key_node, value_node in node.value:
        if isinstance(key_node, yaml.ScalarNode) and key_node.value == key:
            return value_node
    return None


class WorkflowParser:
    """Extracts step-level action references from workflow files."""

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def extract_uses(self, workflow_path: Path) -> List[Tuple[int, str]]:
        """Return ``(line, uses)`` pairs for every step that uses an action.

        Lines are 1-based and pairs follow document order. Unreadable or
        invalid files yield an empty list.
        """
        try:
            with open(workflow_path, 'r', encoding='utf-8') as f:
                root = yaml.compose(f)
        except (OSError, yaml.YAMLError) as e:
            self.logger.debug(f"Skipping {workflow_path}: {e}")
            return []

        jobs = _mapping_get(root, 'jobs') if root is not None else None
        if not isinstance(jobs, yaml.MappingNode):
            return []

        uses_entries = []
        for _, job in jobs.value:
            steps = _mapping_get(job, 'steps')
            if not isinstance(steps, yaml.SequenceNode):
                continue

            for step in steps.value:
                uses = _mapping_get(step, 'uses')
                if isinstance(uses, yaml.ScalarNode) and uses.value:
                    uses_entries.append((uses.start_mark.line + 1, uses.value))

        return uses_entries

    def parse_workflow(self, workflow_path: Path) -> List[ActionReference]:
        """Parse a workflow file into action references."""
        references = [
            ActionReference(uses=uses, source_file=workflow_path, line_number=line)
            for line, uses in self.extract_uses(workflow_path)
        ]
        if not references:
            self.logger.debug(f"No action steps in {workflow_path}")
        for reference in references:
            self.logger.debug(f"Found action: {reference.location} {reference}")
        return references
