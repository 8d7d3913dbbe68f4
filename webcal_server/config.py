"""Settings for the webcal service, read from environment variables."""
from __future__ import annotations

import os
import typing as t


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


# Stamped into the PRODID of every generated calendar
PRODUCT_NAME = os.getenv("WEBCAL_PRODUCT_NAME", "Doubtfire")

WEBCAL_SERVICE_PORT = _env_int("WEBCAL_SERVICE_PORT", 8004)
WEBCAL_SERVICE_URL = os.getenv("WEBCAL_SERVICE_URL", f"http://localhost:{WEBCAL_SERVICE_PORT}")

LOG_LEVEL = os.getenv("WEBCAL_LOG_LEVEL", "INFO")

# Optional JSON document used to seed the in-memory store on startup
DATA_FILE: t.Optional[str] = os.getenv("WEBCAL_DATA_FILE") or None
