"""
Pytest configuration and fixtures for memmodel-c11 tests.
"""
import sys
from pathlib import Path

import pytest

# Add src to path for imports
src_path = Path(__file__).parent.parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from memmodel.c11.enumeration import EnumerationOptions  # noqa: E402


@pytest.fixture
def quiet_options():
    """Enumeration options that neither print nor write graphs."""
    return EnumerationOptions(write_graphs=False, echo_summary=False)
