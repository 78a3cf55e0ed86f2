#!/usr/bin/env python3
"""
Database migration script.
Thin wrapper around ``keyhost-migrate`` for running from a source checkout.
"""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from keyhost.cli.migrate import main


if __name__ == "__main__":
    sys.exit(main())
