import os
import sys
from pathlib import Path

import pytest

# Add the project root directory to sys.path so that 'mystery_feed' can be imported
project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_feed_bytes() -> bytes:
    """A small podcast feed with a live show, a two-guest episode and a one-guest episode."""
    return (FIXTURES_DIR / "sample_feed.xml").read_bytes()
