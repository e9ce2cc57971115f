"""
Pytest configuration and fixtures for disvm tests.
"""
import sys
from pathlib import Path

import pytest

REPO_ROOT = Path(__file__).resolve().parents[2]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

# Reads one byte and echoes it; the zero words after the program are no-ops,
# so control wraps round to address 0 once per byte.
CAT_PROGRAM = "}{"


@pytest.fixture
def cat_source() -> str:
    return CAT_PROGRAM


@pytest.fixture
def program_file(tmp_path):
    def _write(text: str, name: str = "prog.dis") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
