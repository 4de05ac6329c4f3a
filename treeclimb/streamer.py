import time
import pandas as pd


def stream_cumulative(df: pd.DataFrame, chunk_size: int = 30, sleep_s: float = 0.0):
    """
    Simulate the sensor feed: every delivery is the whole buffer so far,
    growing by chunk_size readings each time.
    """
    n = len(df)
    for end in range(chunk_size, n + chunk_size, chunk_size):
        yield df.iloc[:min(end, n)]
        if sleep_s:
            time.sleep(sleep_s)
