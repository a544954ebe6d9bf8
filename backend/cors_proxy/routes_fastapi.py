"""
CORS Proxy API Routes

Provides the relay endpoint the web client uses for upstream data it cannot
fetch directly because of browser CORS rules:

    GET /cors?u=https://forecast.weather.gov/MapClick.php?...

Upstream bytes are returned verbatim. Errors are plain text:
- 400: bad or disallowed target URL
- 500: upstream fetch failed
"""

import logging

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import PlainTextResponse, Response

from .allow_list import parse_target, validate_target, target_host
from .cache_manager import ProxyCache
from .errors import CorsProxyError

logger = logging.getLogger(__name__)

# ============================================
# Router
# ============================================

router = APIRouter(prefix="/cors", tags=["CORS Proxy"])


def get_proxy_cache(request: Request) -> ProxyCache:
    """The application's ProxyCache, created once in create_app."""
    return request.app.state.proxy_cache


async def cors_proxy_error_handler(request: Request, exc: CorsProxyError) -> PlainTextResponse:
    """Render a proxy error as plain text with its status code."""
    if exc.status_code >= 500:
        logger.error(f"[CorsProxy] error serving CORS request for {exc.host or '?'}: {exc}")
    else:
        logger.warning(f"[CorsProxy] rejected target {exc.host or '?'}: {exc}")
    return PlainTextResponse(str(exc), status_code=exc.status_code)


# ============================================
# Endpoints
# ============================================

# Plain `def`: each request runs on its own threadpool worker and may block
# on the upstream fetch.
@router.get("")
@router.get("/")
def proxy_request(
    u: str = Query("", description="URL of the upstream resource to relay"),
    proxy_cache: ProxyCache = Depends(get_proxy_cache),
):
    """
    Relay an allow-listed upstream URL through the cache.

    This endpoint:
    1. Parses the target URL
    2. Checks scheme and host against the allow-list
    3. Serves from cache or fetches with retry
    4. Returns the upstream bytes unchanged
    """
    target = parse_target(u)
    validate_target(target)

    content = proxy_cache.get(target.geturl())
    logger.debug(f"[CorsProxy] Served {target_host(target)} ({len(content)} bytes)")
    return Response(content=content)
