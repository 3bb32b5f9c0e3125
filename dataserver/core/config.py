"""
Data server configuration.
All settings are read from the environment (a local .env file is honoured).
"""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# Database path configuration
DB_PATH = os.getenv("DB_PATH", "./data/dataserver.db")

DEBUG = os.getenv("DEBUG", "false").lower() == "true"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Base address of the data server, used by the producer-side client
SERVER_URL = os.getenv("SERVER_URL", "http://localhost:8090")

# Archival sink forwarding (best-effort)
ARCHIVE_ENABLED = os.getenv("ARCHIVE_ENABLED", "true").lower() == "true"
ARCHIVE_URL = os.getenv("ARCHIVE_URL", "http://localhost:8090/hadoopserver/pushbigdata")
ARCHIVE_TIMEOUT_SEC = float(os.getenv("ARCHIVE_TIMEOUT_SEC", "5"))
ARCHIVE_ASYNC = os.getenv("ARCHIVE_ASYNC", "true").lower() == "true"
ARCHIVE_MAX_WORKERS = int(os.getenv("ARCHIVE_MAX_WORKERS", "4"))

# Legacy behaviour: report acceptance even when the store write fails
SWALLOW_PERSISTENCE_ERRORS = os.getenv("SWALLOW_PERSISTENCE_ERRORS", "false").lower() == "true"

# Version string
VERSION = "1.0.0"


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def ensure_db_directory(db_path: str = None):
    """Ensure the database directory exists."""
    Path(db_path or DB_PATH).parent.mkdir(parents=True, exist_ok=True)


def validate_archive_config():
    """Validate archival forwarding configuration and return any issues."""
    issues = []

    if ARCHIVE_ENABLED and not ARCHIVE_URL.startswith(("http://", "https://")):
        issues.append(f"Invalid ARCHIVE_URL: {ARCHIVE_URL}")

    if ARCHIVE_TIMEOUT_SEC <= 0:
        issues.append("ARCHIVE_TIMEOUT_SEC must be > 0")

    if ARCHIVE_MAX_WORKERS < 1:
        issues.append("ARCHIVE_MAX_WORKERS must be >= 1")

    return issues
