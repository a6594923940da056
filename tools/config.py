"""
config.py — Central configuration for the Twitter video uploader.

Loads .env and exposes credentials, endpoints and upload settings as
module-level constants. Every other tool imports from here.
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------
BASE_DIR = Path(__file__).resolve().parent.parent
load_dotenv(BASE_DIR / ".env")

# ---------------------------------------------------------------------------
# Twitter credentials (pre-provisioned OAuth1 tokens)
# ---------------------------------------------------------------------------
CREDENTIAL_VARS = (
    "TWITTER_CONSUMER_KEY",
    "TWITTER_CONSUMER_SECRET",
    "TWITTER_ACCESS_TOKEN",
    "TWITTER_ACCESS_SECRET",
)

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
STATUS_UPDATE_URL = "https://api.twitter.com/1.1/statuses/update.json"
MEDIA_UPLOAD_URL = "https://upload.twitter.com/1.1/media/upload.json"

REQUEST_TOKEN_URL = "https://api.twitter.com/oauth/request_token"
AUTHORIZE_TOKEN_URL = "https://api.twitter.com/oauth/authorize"
ACCESS_TOKEN_URL = "https://api.twitter.com/oauth/access_token"

# ---------------------------------------------------------------------------
# Upload settings
# ---------------------------------------------------------------------------
SEGMENT_SIZE = 500 * 1024      # bytes per APPEND request
MAX_STATUS_ATTEMPTS = 3        # STATUS polls allowed after the first check
REQUEST_TIMEOUT = float(os.getenv("TWITTER_REQUEST_TIMEOUT", "60"))  # seconds

MEDIA_TYPE = "video/mp4"
MEDIA_CATEGORY = "amplify_video"
SEGMENT_FILENAME = "out.mp4"

# Video file extensions accepted without a warning
VIDEO_EXTENSIONS = {".mp4", ".mov", ".m4v"}

LOGGER_NAME = "twitter_upload"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def load_credentials() -> tuple[str, ...]:
    """Read the four credentials in CREDENTIAL_VARS order ("" when unset)."""
    return tuple(os.getenv(name, "") for name in CREDENTIAL_VARS)


def missing_credentials() -> list[str]:
    """Return the names of credential variables that are unset or empty."""
    return [name for name in CREDENTIAL_VARS if not os.getenv(name)]


def get_logger(debug: bool = False) -> logging.Logger:
    """
    Build the uploader's logger.

    DEBUG when debug is set, ERROR otherwise. The returned logger is handed to
    the uploader once and not reconfigured afterwards.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if debug else logging.ERROR)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))
        logger.addHandler(handler)
    logger.propagate = False
    return logger
