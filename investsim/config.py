"""Runtime configuration.

Everything here is a plain module-level constant. Values that differ between
deployments can be overridden through environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent

# ---------------------------------------------------------------------------
# Data location
# ---------------------------------------------------------------------------

DATA_DIR = Path(os.environ.get("INVESTSIM_DATA_DIR", str(REPO_ROOT / "data")))
DATA_URL = os.environ.get("INVESTSIM_DATA_URL")  # e.g. "https://host/data"

TIMELINE_FILE = "Asset_Timeline.csv"
FD_RATES_FILE = "Fixed_Deposits/fd_rates.csv"
FILENAME_MAPPING_FILE = "asset_filename_mapping.json"

HTTP_TIMEOUT = float(os.environ.get("INVESTSIM_HTTP_TIMEOUT", "15"))
LOAD_WORKERS = int(os.environ.get("INVESTSIM_LOAD_WORKERS", "8"))

# Live runs kept by the HTTP adapter; the oldest is dropped past this
MAX_SESSIONS = int(os.environ.get("INVESTSIM_MAX_SESSIONS", "100"))

# ---------------------------------------------------------------------------
# Game clock
# ---------------------------------------------------------------------------

HISTORY_START_YEAR = 1990
HISTORY_END_YEAR = 2025
GAME_YEARS = 20
TOTAL_MONTHS = GAME_YEARS * 12
BUFFER_YEARS = 5  # window ends this long after the last category appears

MONTH_DURATION_MS = int(os.environ.get("INVESTSIM_MONTH_DURATION_MS", "5000"))

# Raw price rows outside this range are treated as bad data
PRICE_MIN_YEAR = 1990
PRICE_MAX_YEAR = 2030

# ---------------------------------------------------------------------------
# Money
# ---------------------------------------------------------------------------

STARTING_CASH = 50_000.0
SAVINGS_ROI = 4.0  # % p.a., compounded monthly
DEFAULT_FD_RATE = 6.5  # % p.a. when no rate is known for a year
