import numpy as np
import pandas as pd

from .config import TIME_COL, ALT_COL
from .detector import Sample


def records_from_snapshot(snapshot: dict | None) -> pd.DataFrame:
    """
    Flatten a realtime-database snapshot into timestamp/altitude rows.

    Sensor nodes push either {key: {"timestamp": "...", "altitude": "..."}}
    or a bare {timestamp: altitude}; in the latter case the key is the time.
    Values stay unparsed here, clean_readings() does the coercion.
    """
    rows = []
    for key, item in (snapshot or {}).items():
        if isinstance(item, dict):
            rows.append({
                TIME_COL: item.get("timestamp") or key,
                ALT_COL: item.get("altitude"),
            })
        else:
            rows.append({TIME_COL: key, ALT_COL: item})
    return pd.DataFrame(rows, columns=[TIME_COL, ALT_COL])


def clean_readings(df: pd.DataFrame) -> pd.DataFrame:
    """Numeric, finite, one row per timestamp (last delivery wins), sorted by time."""
    out = df[[TIME_COL, ALT_COL]].copy()
    for c in (TIME_COL, ALT_COL):
        out[c] = pd.to_numeric(out[c], errors="coerce")

    finite = np.isfinite(out[TIME_COL].to_numpy(dtype=float)) & np.isfinite(out[ALT_COL].to_numpy(dtype=float))
    out = out[finite].copy()

    out[TIME_COL] = out[TIME_COL].astype("int64")
    out[ALT_COL] = out[ALT_COL].astype(float)

    out = out.drop_duplicates(subset=TIME_COL, keep="last")
    return out.sort_values(TIME_COL, kind="stable").reset_index(drop=True)


def to_samples(df: pd.DataFrame) -> list[Sample]:
    return [
        Sample(timestamp=int(t), altitude=float(a))
        for t, a in zip(df[TIME_COL].to_numpy(), df[ALT_COL].to_numpy())
    ]
