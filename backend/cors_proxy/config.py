"""
CORS Proxy Configuration

All settings come from environment variables and are read once at import.
"""

import os
from pathlib import Path

# Outbound fetch
MAX_FETCH_ATTEMPTS = int(os.getenv("CORS_PROXY_MAX_ATTEMPTS", "3"))
FETCH_TIMEOUT_SECONDS = float(os.getenv("CORS_PROXY_TIMEOUT", "30"))

# Share one in-flight fetch between concurrent misses on the same URL
COALESCE_MISSES = os.getenv("CORS_PROXY_COALESCE", "").lower() in ("true", "1", "yes")

# Bundled web client
DEFAULT_STATIC_DIR = Path(__file__).resolve().parent.parent / "static_site" / "resources"
STATIC_DIR = Path(os.getenv("STATIC_DIR", str(DEFAULT_STATIC_DIR)))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DEFAULT_LISTEN_ADDR = ":8080"
