"""Pytest configuration and shared fixtures for dfatable tests."""

import pytest
from pathlib import Path
import sys

# Add src to path for testing
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from dfatable import Row, Table, Transition  # noqa: E402

E = Transition.error()
G = Transition.goto


REFERENCE_TEXT = """- 0 1 E E E E
- 1 E 2 E E E
- 2 2 3 2 2 2
- 3 4 3 2 2 2
+ 4 E E E E E"""


@pytest.fixture
def reference_text():
    """The five-state reference table in canonical form."""
    return REFERENCE_TEXT


@pytest.fixture
def reference_table():
    """The reference table built directly, without parsing."""
    return Table((
        Row(False, 0, (G(1), E, E, E, E)),
        Row(False, 1, (E, G(2), E, E, E)),
        Row(False, 2, (G(2), G(3), G(2), G(2), G(2))),
        Row(False, 3, (G(4), G(3), G(2), G(2), G(2))),
        Row(True, 4, (E, E, E, E, E)),
    ))


@pytest.fixture
def table_file(tmp_path, reference_text):
    """Reference table written to a temporary file."""
    path = tmp_path / "table.txt"
    path.write_text(reference_text)
    return path
