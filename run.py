#!/usr/bin/env python3
"""Runner script - use this to run without pip install."""

import sys
from pathlib import Path

# Project root holds cli/, src/ holds translation_stats
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root / "src"))
sys.path.insert(0, str(project_root))

from cli.main import app

if __name__ == "__main__":
    app()
