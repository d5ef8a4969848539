"""
Shared pytest fixtures for the latency dashboard tests.

Every fixture writes its CSV into ``tmp_path`` so the load cache (keyed by
resolved path and mtime) never leaks between tests.
"""

from pathlib import Path
from typing import Callable

import pandas as pd
import pytest


SAMPLE_CSV = """Puzzle,Model,Time,Correct
p1,CSP Solver,1.5ms,true
p1,Brute Force Solver,1.2s,true
p2,CSP Solver,2.5ms,true
p2,Brute Force Solver,800ms,false
p3,CSP Solver,abc,true
p3,Stochastic Solver,n/a,false
"""


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write ``text`` to a file under ``tmp_path`` and return its path."""

    def _write(text: str, name: str = "output.csv") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def sample_csv(write_csv) -> Path:
    return write_csv(SAMPLE_CSV)


@pytest.fixture
def scenario_a() -> pd.DataFrame:
    return pd.DataFrame({"Model": ["m1", "m1", "m2"], "Time": ["100ms", "1s", "50ms"]})
