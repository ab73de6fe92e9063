"""Runtime configuration.

Values come from the environment, optionally seeded from a ``.env`` file
in the project root.  They are read on every call so a changed
environment takes effect without re-importing this module.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# --- Base Directory ---
# When installed in editable mode the project root is the repo root.
BASE_DIR = Path(__file__).resolve().parents[3]

# --- Load Environment Variables ---
load_dotenv(BASE_DIR / ".env")


def data_file() -> Path:
    """Location of the JSON dataset."""
    return Path(os.getenv("BOTTLETRACK_DATA_FILE", BASE_DIR / "data" / "db.json"))


def updated_by() -> str:
    """Attribution tag written on every tracking entry."""
    return os.getenv("BOTTLETRACK_UPDATED_BY", "bottle_team")


def log_level() -> str:
    return os.getenv("BOTTLETRACK_LOG_LEVEL", "INFO").upper()


def log_dir() -> Path:
    return Path(os.getenv("BOTTLETRACK_LOG_DIR", BASE_DIR / "logs"))
