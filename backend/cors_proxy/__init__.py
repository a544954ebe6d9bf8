"""
CORS Proxy Module

Relays requests from the bundled web client to a fixed set of weather,
tide and air-quality providers that do not allow cross-origin calls.

Features:
- Exact-match host allow-list (http/https only)
- Per-URL in-memory cache with host-specific expiry
- Bounded retry on transport errors and 5xx responses
"""

from .routes_fastapi import router, cors_proxy_error_handler
from .cache_manager import ProxyCache, CacheEntry, EntryState
from .fetcher import UpstreamFetcher
from .errors import (
    CorsProxyError,
    ParseError,
    UnsupportedSchemeError,
    InvalidHostError,
    PermanentError,
    TransientError,
    UpstreamIOError,
)

__all__ = [
    "router",
    "cors_proxy_error_handler",
    "ProxyCache",
    "CacheEntry",
    "EntryState",
    "UpstreamFetcher",
    "CorsProxyError",
    "ParseError",
    "UnsupportedSchemeError",
    "InvalidHostError",
    "PermanentError",
    "TransientError",
    "UpstreamIOError",
]
