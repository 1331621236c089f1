#!/usr/bin/env python3
"""Bank feed reconciliation tool.

Entry point script wrapping the package CLI for convenient execution.

Usage:
    python reconcile_feed.py --feed for_review.csv --dry-run

For full documentation and options:
    python reconcile_feed.py --help
"""

import sys
from pathlib import Path

# Add src to path for development installs
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from feed_reconciler.cli import main

if __name__ == "__main__":
    sys.exit(main())
