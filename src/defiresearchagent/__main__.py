"""
Main entry point for the defiresearchagent package.

Usage:
    python -m defiresearchagent report bitcoin
"""

import sys

from .cli import main

if __name__ == "__main__":
    sys.exit(main())
