from __future__ import annotations

import math

import pandas as pd

from treeclimb.detector import Sample
from treeclimb.preprocessing import clean_readings, records_from_snapshot, to_samples


def test_records_from_snapshot_handles_both_node_shapes() -> None:
    snapshot = {
        "-Nabc": {"timestamp": "20", "altitude": "1.5"},
        "-Nabd": {"timestamp": "10", "altitude": "bad"},
        "30": "2.5",
    }
    df = records_from_snapshot(snapshot)
    assert list(df.columns) == ["timestamp", "altitude"]
    assert len(df) == 3

    clean = clean_readings(df)
    assert clean["timestamp"].tolist() == [20, 30]
    assert clean["altitude"].tolist() == [1.5, 2.5]


def test_records_from_snapshot_uses_key_when_timestamp_missing() -> None:
    df = clean_readings(records_from_snapshot({"1700000000": {"altitude": 3.0}}))
    assert df["timestamp"].tolist() == [1700000000]


def test_records_from_empty_snapshot() -> None:
    assert records_from_snapshot(None).empty
    assert clean_readings(records_from_snapshot({})).empty


def test_clean_readings_sorts_and_keeps_last_duplicate() -> None:
    df = pd.DataFrame({"timestamp": [3, 1, 3, 2], "altitude": [1.0, 2.0, 9.0, 4.0]})
    clean = clean_readings(df)
    assert clean["timestamp"].tolist() == [1, 2, 3]
    assert clean["altitude"].tolist() == [2.0, 4.0, 9.0]
    assert clean.index.tolist() == [0, 1, 2]


def test_clean_readings_drops_non_finite_rows() -> None:
    df = pd.DataFrame({
        "timestamp": [1, 2, 3, "x", 5],
        "altitude": [1.0, math.nan, math.inf, 4.0, "5.5"],
    })
    clean = clean_readings(df)
    assert clean["timestamp"].tolist() == [1, 5]
    assert clean["altitude"].tolist() == [1.0, 5.5]


def test_to_samples() -> None:
    df = pd.DataFrame({"timestamp": [1, 2], "altitude": [1.25, 2.5]})
    samples = to_samples(df)
    assert samples == [Sample(1, 1.25), Sample(2, 2.5)]
    assert isinstance(samples[0].timestamp, int)
    assert isinstance(samples[0].altitude, float)
