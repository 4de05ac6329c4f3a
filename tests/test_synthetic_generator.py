from __future__ import annotations

import numpy as np

from treeclimb.detector import detect_climbs
from treeclimb.preprocessing import to_samples
from treeclimb.synthetic_generator import generate_altitude_series, inject_climb, with_session_gap


def test_generate_altitude_series_shape_and_spacing() -> None:
    df = generate_altitude_series(n_rows=100, step_s=10, base_altitude=12.0, start_time=1000, seed=1)
    assert len(df) == 100
    assert df["timestamp"].iloc[0] == 1000
    assert set(np.diff(df["timestamp"].to_numpy()).tolist()) == {10}
    assert abs(df["altitude"].mean() - 12.0) < 0.5


def test_generate_altitude_series_is_reproducible() -> None:
    a = generate_altitude_series(n_rows=50, seed=3)
    b = generate_altitude_series(n_rows=50, seed=3)
    assert a.equals(b)


def test_noise_alone_produces_no_climbs() -> None:
    df = generate_altitude_series(n_rows=720, seed=42)
    assert detect_climbs(to_samples(df), threshold=3) == []


def test_injected_climb_is_detected_once() -> None:
    df = generate_altitude_series(n_rows=200, step_s=10, base_altitude=12.0, start_time=0, seed=42)
    df = inject_climb(df, start_time=500, height_m=8.0, up_s=120, down_s=10)

    peak_row = df.loc[df["timestamp"] == 620, "altitude"].iloc[0]
    assert peak_row > 12.0 + 6.5

    climbs = detect_climbs(to_samples(df), threshold=3)
    assert len(climbs) == 1
    assert climbs[0].end_time == 630
    assert climbs[0].total_descent > 6.0


def test_with_session_gap_shifts_later_readings() -> None:
    df = generate_altitude_series(n_rows=5, step_s=10, start_time=0)
    shifted = with_session_gap(df, after_time=20, gap_s=1000)
    assert shifted["timestamp"].tolist() == [0, 10, 20, 1030, 1040]
    assert df["timestamp"].tolist() == [0, 10, 20, 30, 40]
