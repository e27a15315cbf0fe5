"""
Shared test fixtures for csv2oscal tests.

Inputs are synthetic control listings written to ``tmp_path``; no files
outside the test tree are required.
"""

from datetime import datetime, timezone
from itertools import count
from pathlib import Path

import pytest

HEADER = "Control Acronym,Component Name,Control Description"

SAMPLE_ROWS = [
    ("AC-1", "MyApp", "Enforces access control"),
    ("AU-2", "Logger", "Records audit events"),
    ("SC-8", "Istio", "Protects transmitted information"),
]


@pytest.fixture()
def sequential_ids():
    """Deterministic identifier generator: id-1, id-2, ..."""
    counter = count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture()
def fixed_clock():
    moment = datetime(2024, 5, 1, 12, 30, 15, 123456, tzinfo=timezone.utc)
    return lambda: moment


@pytest.fixture()
def write_csv(tmp_path: Path):
    """Write CSV text to a file under tmp_path and return its path."""
    def _write(text: str, name: str = "controls.csv") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


@pytest.fixture()
def sample_csv(write_csv) -> Path:
    lines = [HEADER] + [",".join(row) for row in SAMPLE_ROWS]
    return write_csv("\n".join(lines) + "\n")
