"""Configuration: paths, source URLs, chamber labels, run settings."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

log = logging.getLogger(__name__)

# Load .env from the project root (won't override existing env vars)
load_dotenv(Path(__file__).parent / ".env")

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
ROOT = Path(os.environ.get("SCHEDULE_ROOT", str(Path(__file__).parent)))
# Canonical artifacts read by the calendar front end
DATA_DIR = Path(os.environ.get("SCHEDULE_DATA_DIR", str(ROOT / "docs" / "data")))
# Raw scrape payloads (House API envelope, Senate HTML)
RAW_DIR = Path(os.environ.get("SCHEDULE_RAW_DIR", str(ROOT / "output")))

# ---------------------------------------------------------------------------
# Chambers and sources
# ---------------------------------------------------------------------------
HOUSE = "House of Representatives"
SENATE = "Senate"
CHAMBERS = (HOUSE, SENATE)

HOUSE_SOURCE = "House of Representatives (API)"
SENATE_SOURCE = "Senate Weekly Schedule"

# Artifact keys (file stems under DATA_DIR / RAW_DIR)
HOUSE_KEY = "house"
SENATE_KEY = "senate"
ALL_KEY = "all"
METADATA_KEY = "metadata"
SENATE_HISTORY_KEY = "senate_history"
HOUSE_RAW = "house_api.json"
SENATE_RAW = "senate.html"

SENATE_SCHEDULE_URL = os.environ.get(
    "SENATE_SCHEDULE_URL", "https://web.senate.gov.ph/committee/schedwk.asp"
)
# The House API sits behind bot mitigation; leave unset when a browser-based
# fetcher drops house_api.json into RAW_DIR instead.
HOUSE_API_URL = os.environ.get("HOUSE_API_URL", "")
# 0 = current week on the House schedule endpoint
WEEK_DEFAULT = "0"

HTTP_TIMEOUT = float(os.environ.get("HTTP_TIMEOUT", "30"))

# Consecutive source failures before an alert is written
ALERT_THRESHOLD = int(os.environ.get("ALERT_THRESHOLD", "3"))


def get_week() -> str:
    """House schedule week parameter, read on each call so tests can override."""
    return os.environ.get("WEEK", WEEK_DEFAULT) or WEEK_DEFAULT


def get_slack_webhook_url() -> str:
    return os.environ.get("SLACK_WEBHOOK_URL", "")
