#!/usr/bin/env python3
"""
Backport Reminder

Runs one reminder pass from a checkout, without installing the package.
Intended for scheduled CI jobs: configuration comes from GITHUB_TOKEN,
GITHUB_REPOSITORY and the optional reminder variables.
"""

import sys
from pathlib import Path

# Add src directory to Python path
src_path = Path(__file__).parent / "src"
sys.path.insert(0, str(src_path))

from backport_reminder.cli import main

if __name__ == '__main__':
    main(["run", *sys.argv[1:]])
