"""
Pytest configuration and shared fixtures.
"""
import os
import sys
from pathlib import Path

import pytest

# Add the project root to the Python path for test imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))
# GitPython looks for git at import time; the git tests skip themselves.
os.environ.setdefault("GIT_PYTHON_REFRESH", "quiet")

from blamediff.models import HunkPair, HunkSide, Op  # noqa: E402


@pytest.fixture
def make_pair():
    """Build a HunkPair from (file, line, count) tuples."""
    def _make(src, dst):
        return HunkPair(HunkSide(src[0], Op.SUB, src[1], src[2]), HunkSide(dst[0], Op.ADD, dst[1], dst[2]))
    return _make
