import sys, os

# Ensure src is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
if SRC not in sys.path:
    sys.path.insert(0, SRC)

from tests.helpers import build_match3, drive_ticks, load_kinds, BASE_PATTERN, stalemate_pattern

__all__ = [
    "build_match3",
    "drive_ticks",
    "load_kinds",
    "BASE_PATTERN",
    "stalemate_pattern",
]
