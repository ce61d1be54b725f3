"""
action-drift

Scans GitHub Actions workflows for outdated action references, reports
version drift with compatibility scores, and optionally opens update pull
requests.
"""

__version__ = "1.0.0"
