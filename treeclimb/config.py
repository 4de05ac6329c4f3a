import os
from dotenv import load_dotenv

# Load .env from project root
load_dotenv(override=True)

# ---- Detection ----
# Meters of rise above baseline (to start) and fall below peak (to complete) a climb
CLIMB_THRESHOLD_M = float(os.getenv("CLIMB_THRESHOLD_M", "3.0"))

# A pause longer than this between readings starts a new session (30 min)
SESSION_GAP_S = int(os.getenv("SESSION_GAP_S", "1800"))

# Expected columns of the readings feed
TIME_COL = "timestamp"
ALT_COL = "altitude"

# ---- Files ----
# Optional recorded readings; a synthetic series is generated when missing
SAMPLES_PATH = os.getenv("SAMPLES_PATH", "data/readings/altitude_readings.csv")
SYNTHETIC_PATH = os.getenv("SYNTHETIC_PATH", "data/synthetic/altitude_readings.csv")
CLIMBS_PATH = os.getenv("CLIMBS_PATH", "outputs/logs/climbs.csv")
STATUS_PATH = os.getenv("STATUS_PATH", "outputs/logs/status.json")

# How many readings each simulated redelivery of the buffer adds
STREAM_CHUNK_SIZE = int(os.getenv("STREAM_CHUNK_SIZE", "30"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
