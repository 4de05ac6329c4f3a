import numpy as np
import pandas as pd

from .config import TIME_COL, ALT_COL


def generate_altitude_series(
    n_rows: int = 720,
    step_s: int = 10,
    base_altitude: float = 12.0,
    noise_sd: float = 0.3,
    start_time: int = 1_700_000_000,
    seed: int = 42,
):
    """
    Create a flat synthetic barometer trace:
    - one reading every step_s seconds (the sensor's 10 s interval by default)
    - gaussian noise around base_altitude, well under the climb threshold
    """
    rng = np.random.default_rng(seed)
    time_s = start_time + np.arange(n_rows, dtype="int64") * step_s
    altitude = base_altitude + rng.normal(0.0, noise_sd, size=n_rows)
    return pd.DataFrame({TIME_COL: time_s, ALT_COL: altitude})


def inject_climb(df: pd.DataFrame, start_time: int, height_m: float, up_s: float, down_s: float):
    """
    Adds a triangular up-and-down excursion of height_m starting at start_time:
    a linear rise over up_s seconds followed by a linear descent over down_s.
    """
    out = df.copy()
    t = out[TIME_COL].to_numpy().astype(float) - start_time
    bump = np.zeros(len(out))

    up = (t >= 0) & (t <= up_s)
    bump[up] = height_m * t[up] / up_s if up_s > 0 else height_m

    down = (t > up_s) & (t <= up_s + down_s)
    bump[down] = height_m * (1.0 - (t[down] - up_s) / down_s) if down_s > 0 else 0.0

    out[ALT_COL] = out[ALT_COL] + bump
    return out


def with_session_gap(df: pd.DataFrame, after_time: int, gap_s: int):
    """Shift every reading after after_time by gap_s, opening a pause in the trace."""
    out = df.copy()
    mask = out[TIME_COL] > after_time
    out.loc[mask, TIME_COL] = out.loc[mask, TIME_COL] + gap_s
    return out
