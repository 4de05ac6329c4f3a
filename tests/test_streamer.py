from __future__ import annotations

import pandas as pd

from treeclimb.streamer import stream_cumulative


def test_stream_cumulative_grows_by_chunk() -> None:
    df = pd.DataFrame({"timestamp": range(70), "altitude": [0.0] * 70})
    sizes = [len(buf) for buf in stream_cumulative(df, chunk_size=30)]
    assert sizes == [30, 60, 70]


def test_stream_cumulative_last_delivery_is_whole_buffer() -> None:
    df = pd.DataFrame({"timestamp": range(10), "altitude": [float(i) for i in range(10)]})
    *_, last = stream_cumulative(df, chunk_size=4)
    assert last.equals(df)


def test_stream_cumulative_empty() -> None:
    df = pd.DataFrame({"timestamp": [], "altitude": []})
    assert list(stream_cumulative(df, chunk_size=5)) == []
