"""Environment configuration for upstream endpoints and the on-disk cache."""

import os
from pathlib import Path

# Local cache directory (one parquet file per season)
CACHE_DIR = Path(os.environ.get("NBA_SCORERS_CACHE_DIR", "data/cache"))

# Primary source: balldontlie
BALLDONTLIE_BASE_URL = os.environ.get(
    "BALLDONTLIE_BASE_URL", "https://api.balldontlie.io/v1"
).rstrip("/")
BALLDONTLIE_API_KEY = os.environ.get("BALLDONTLIE_API_KEY")

# Fallback source: stats.nba.com league leaders
NBA_STATS_URL = os.environ.get(
    "NBA_STATS_URL", "https://stats.nba.com/stats/leagueleaders"
)

# Delay between per-player requests on the primary source
API_DELAY = float(os.environ.get("NBA_SCORERS_API_DELAY", "0.5"))

REQUEST_TIMEOUT = 15

FIRST_SEASON = 1946
DEFAULT_NUM_PLAYERS = 25

# Qualification thresholds differ per source
PRIMARY_MIN_GAMES = 58
FALLBACK_MIN_GAMES = 20

FALLBACK_ATTEMPTS = 3
