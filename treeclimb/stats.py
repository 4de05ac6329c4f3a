from dataclasses import dataclass

import pandas as pd

from .config import TIME_COL, ALT_COL


@dataclass
class SessionStats:
    total_readings: int
    latest_altitude: float | None
    max_altitude: float
    avg_altitude: float
    session_start: int | None
    duration_minutes: int
    climbs_per_hour: float


def session_statistics(df: pd.DataFrame, climb_count: int, now: int | None = None) -> SessionStats:
    """
    Summary numbers for one session's readings.

    Duration runs from the first reading to `now` (epoch seconds), or to the
    last reading when `now` is not given, in whole minutes.
    """
    if df.empty:
        return SessionStats(0, None, 0.0, 0.0, None, 0, 0.0)

    t = df[TIME_COL]
    alt = df[ALT_COL]
    start = int(t.iloc[0])
    end = int(now) if now is not None else int(t.iloc[-1])
    minutes = max(0, (end - start) // 60)
    rate = climb_count / minutes * 60 if minutes > 0 else 0.0

    return SessionStats(
        total_readings=len(df),
        latest_altitude=float(alt.iloc[-1]),
        max_altitude=float(alt.max()),
        avg_altitude=round(float(alt.mean()), 1),
        session_start=start,
        duration_minutes=int(minutes),
        climbs_per_hour=round(float(rate), 1),
    )


def format_duration(minutes: int) -> str:
    if minutes < 60:
        return f"{minutes}m"
    return f"{minutes // 60}h {minutes % 60}m"
