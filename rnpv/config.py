"""
rNPV Valuator Configuration

All runtime settings are read from environment variables once, at import.

Variables:
    DATABASE_URL         SQLAlchemy URL (default: SQLite file beside this package)
    SQLALCHEMY_ECHO      "true" to log SQL statements
    RNPV_STORE_BACKEND   "sql" (default) or "memory"
    RNPV_LOE_RECORDS     JSON file of {drug_name: [records]}; placeholder LOE when unset
    RNPV_TRIAL_FIXTURES  JSON file of {nct_id: ClinicalTrials.gov v2 payload}
    RNPV_LOG_LEVEL       Logging level name (default INFO)
    RNPV_CORS_ORIGINS    Comma-separated list of allowed CORS origins
"""

import os
from pathlib import Path

_PKG_DIR = Path(__file__).parent

DATABASE_URL = os.environ.get(
    "DATABASE_URL",
    f"sqlite:///{_PKG_DIR / 'rnpv.db'}"
)
SQLALCHEMY_ECHO = os.environ.get("SQLALCHEMY_ECHO", "false").lower() == "true"

STORE_BACKEND = os.environ.get("RNPV_STORE_BACKEND", "sql").lower()

LOE_RECORDS_PATH = os.environ.get("RNPV_LOE_RECORDS") or None
TRIAL_FIXTURES_PATH = os.environ.get("RNPV_TRIAL_FIXTURES") or None

LOG_LEVEL = os.environ.get("RNPV_LOG_LEVEL", "INFO").upper()

CORS_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        "RNPV_CORS_ORIGINS",
        "http://localhost:3000,http://127.0.0.1:3000,http://localhost:8501",
    ).split(",")
    if origin.strip()
]
