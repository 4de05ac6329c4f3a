import logging
from collections.abc import Sequence

import numpy as np
import pandas as pd

from .config import CLIMB_THRESHOLD_M, SESSION_GAP_S, TIME_COL
from .detector import Climb, ClimbDetector, Sample

logger = logging.getLogger(__name__)


def split_sessions(df: pd.DataFrame, gap_s: float = SESSION_GAP_S) -> list[pd.DataFrame]:
    """Split a clean, sorted series wherever consecutive readings are more than gap_s apart."""
    if df.empty:
        return []
    t = df[TIME_COL].to_numpy()
    breaks = np.flatnonzero(np.diff(t) > gap_s) + 1
    bounds = [0, *breaks.tolist(), len(df)]
    return [df.iloc[lo:hi].reset_index(drop=True) for lo, hi in zip(bounds[:-1], bounds[1:])]


class SessionTracker:
    """
    Feeds a cumulative readings buffer into one ClimbDetector, session by session.

    A gap longer than gap_s between two readings closes the current session:
    its climbs are moved to `history` and the detector is reset so the next
    session starts from a fresh baseline. Only the current session's slice of
    the buffer is handed to the detector.
    """

    def __init__(self, threshold: float = CLIMB_THRESHOLD_M, gap_s: float = SESSION_GAP_S):
        self.gap_s = gap_s
        self.detector = ClimbDetector(threshold=threshold)
        self.history: list[tuple[Climb, ...]] = []
        self._start = 0      # index of the current session's first reading
        self._scanned = 0    # readings already checked for gaps

    @property
    def session_index(self) -> int:
        return len(self.history)

    @property
    def session_start(self) -> int:
        return self._start

    @property
    def event_count(self) -> int:
        return self.detector.event_count

    def update(self, series: Sequence) -> int:
        """Take the full buffer known so far; return the current session's climb count."""
        n = len(series)
        for i in range(max(self._scanned, self._start + 1), n):
            prev = Sample.coerce(series[i - 1]).timestamp
            cur = Sample.coerce(series[i]).timestamp
            if cur - prev > self.gap_s:
                self._fold_until(series, i)
                self._close_session(next_start=i, gap=cur - prev)
        self._scanned = max(self._scanned, n)

        self._fold_until(series, n)
        return self.detector.event_count

    def all_climbs(self) -> list[tuple[int, Climb]]:
        """(session_index, climb) for closed sessions followed by the current one."""
        out = [(idx, c) for idx, climbs in enumerate(self.history) for c in climbs]
        out.extend((self.session_index, c) for c in self.detector.events)
        return out

    def reset(self):
        """Start over, forgetting the buffer position and every session."""
        self.detector.reset()
        self.history = []
        self._start = 0
        self._scanned = 0

    def _fold_until(self, series: Sequence, end: int):
        # index-based, the buffer is never copied
        for i in range(self._start + self.detector.state.cursor + 1, end):
            self.detector.ingest_one(series[i])

    def _close_session(self, next_start: int, gap: float):
        logger.info(
            "New session after %.0f min gap: closing session %d with %d climbs",
            gap / 60.0, self.session_index, self.detector.event_count,
        )
        self.history.append(self.detector.events)
        self.detector.reset()
        self._start = next_start
