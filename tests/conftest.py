"""Test setup for config-docs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


@pytest.fixture
def streamlit_fixture() -> Path:
    """Directory holding the demo configuration module and its reference output."""
    return ROOT / "tests" / "fixtures" / "01_streamlit"
