from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from treeclimb.detector import Sample  # noqa: E402


def make_series(altitudes, step: int = 1, start: int = 0) -> list[Sample]:
    """Evenly spaced samples for the given altitudes."""

    return [Sample(timestamp=start + i * step, altitude=float(a)) for i, a in enumerate(altitudes)]


@pytest.fixture
def series_factory():
    return make_series
