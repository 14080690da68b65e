#!/usr/bin/env python3
"""
Main CLI for Fontify
====================

Runs the ``fontify`` command group from a source checkout.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from fontify.cli import main

if __name__ == "__main__":
    main()
