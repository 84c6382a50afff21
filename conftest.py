"""
Root conftest: make the src layout importable without an install.
"""

import sys
from pathlib import Path

# Ensure src on path
sys.path.insert(0, str(Path(__file__).parent / "src"))
