#!/usr/bin/env python3
"""
action-drift - Main Entry Point
"""

import sys
from action_drift.cli import main

if __name__ == "__main__":
    sys.exit(main())
