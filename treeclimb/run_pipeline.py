import os
import json
import logging
from pathlib import Path
import pandas as pd

from .config import (
    CLIMB_THRESHOLD_M, SESSION_GAP_S, TIME_COL, SAMPLES_PATH, SYNTHETIC_PATH,
    CLIMBS_PATH, STATUS_PATH, STREAM_CHUNK_SIZE, LOG_LEVEL,
)
from .preprocessing import clean_readings, to_samples
from .sessions import SessionTracker, split_sessions
from .stats import session_statistics, format_duration
from .streamer import stream_cumulative
from .synthetic_generator import generate_altitude_series, inject_climb, with_session_gap

logger = logging.getLogger(__name__)


def setup_logging(level: str = LOG_LEVEL):
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def load_readings() -> pd.DataFrame:
    """Recorded readings if available, otherwise a synthetic two-session trace (also written to disk)."""
    csv_path = Path(SAMPLES_PATH)
    if csv_path.exists():
        logger.info("Loading readings from %s", csv_path)
        return pd.read_csv(csv_path)

    logger.info("No readings at %s, generating a synthetic trace", csv_path)
    df = generate_altitude_series(n_rows=720, step_s=10, seed=7)
    t0 = int(df[TIME_COL].iloc[0])
    df = inject_climb(df, start_time=t0 + 600, height_m=8.0, up_s=120, down_s=10)
    df = inject_climb(df, start_time=t0 + 1800, height_m=6.0, up_s=90, down_s=10)
    df = inject_climb(df, start_time=t0 + 3600, height_m=10.0, up_s=150, down_s=10)
    # Pause the recording for longer than a session gap before the last climb
    df = with_session_gap(df, after_time=t0 + 3000, gap_s=SESSION_GAP_S + 600)

    out_path = Path(SYNTHETIC_PATH)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out_path, index=False)
    return df


def main():
    """End-to-end pipeline.

    - Loads recorded altitude readings (or generates a synthetic trace).
    - Replays them as a growing buffer, the way the sensor feed redelivers
      the whole series on every update.
    - Folds each delivery into a session-aware climb detector.
    - Writes every completed climb to CLIMBS_PATH and the final detector
      status plus session statistics to STATUS_PATH.
    """
    setup_logging()

    raw = load_readings()
    if raw.empty:
        raise RuntimeError("No altitude readings to process.")

    tracker = SessionTracker(threshold=CLIMB_THRESHOLD_M, gap_s=SESSION_GAP_S)
    deliveries = 0
    # Clean once so every delivery extends the same sorted, deduplicated series
    clean = clean_readings(raw)
    for buffer in stream_cumulative(clean, chunk_size=STREAM_CHUNK_SIZE):
        tracker.update(to_samples(buffer))
        deliveries += 1
    logger.info("Processed %d deliveries", deliveries)

    # 1) Climbs log
    rows = [{"session": idx, **c.to_dict()} for idx, c in tracker.all_climbs()]
    climbs_df = pd.DataFrame(rows)
    os.makedirs(os.path.dirname(CLIMBS_PATH) or ".", exist_ok=True)
    climbs_df.to_csv(CLIMBS_PATH, index=False)

    # 2) Current session status
    sessions = split_sessions(clean, gap_s=SESSION_GAP_S)
    current = sessions[-1] if sessions else clean
    stats = session_statistics(current, tracker.event_count)
    status = {
        "detector": tracker.detector.status().to_dict(),
        "sessionIndex": tracker.session_index,
        "sessions": len(sessions),
        "session": {
            "totalReadings": stats.total_readings,
            "latestAltitude": stats.latest_altitude,
            "maxAltitude": stats.max_altitude,
            "avgAltitude": stats.avg_altitude,
            "sessionStart": stats.session_start,
            "durationMinutes": stats.duration_minutes,
            "climbsPerHour": stats.climbs_per_hour,
        },
    }
    status_file = Path(STATUS_PATH)
    status_file.parent.mkdir(parents=True, exist_ok=True)
    status_file.write_text(json.dumps(status, indent=2), encoding="utf-8")

    print("Done.")
    print(f"Sessions: {len(sessions)}")
    print(f"Trees climbed (all sessions): {len(rows)}")
    print(f"Trees climbed (this session): {tracker.event_count} "
          f"in {format_duration(stats.duration_minutes)} ({stats.climbs_per_hour}/h)")
    if tracker.detector.status().climbing:
        print("Currently climbing.")
    if len(rows):
        print(climbs_df.head(10).to_string(index=False))


if __name__ == "__main__":
    main()
