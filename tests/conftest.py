"""Shared pytest setup for the shamfares tests."""

import sys
from pathlib import Path

# Import shamfares from src/ when it is not installed
SRC_DIR = Path(__file__).resolve().parent.parent / "src"
if SRC_DIR.is_dir() and str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))
