"""
WeatherStar Server

Serves the bundled web client and relays the client's cross-origin data
requests through the caching CORS proxy.

Usage:
    weatherstar-server                 # listen on :8080
    weatherstar-server -addr 127.0.0.1:9000
"""

import argparse
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import List, Optional, Tuple, Union

import uvicorn
from fastapi import FastAPI

from cors_proxy import ProxyCache, UpstreamFetcher, CorsProxyError, cors_proxy_error_handler
from cors_proxy import router as cors_router
from cors_proxy.config import COALESCE_MISSES, DEFAULT_LISTEN_ADDR, LOG_LEVEL, STATIC_DIR
from static_site import CaseInsensitiveResources, static_router

logger = logging.getLogger(__name__)


def create_app(
    proxy_cache: Optional[ProxyCache] = None,
    static_dir: Optional[Union[str, Path]] = None,
) -> FastAPI:
    """
    Build the application.

    Args:
        proxy_cache: Cache shared by every /cors request (default: new cache
            with a default UpstreamFetcher)
        static_dir: Root of the bundled client (default: STATIC_DIR)
    """
    if proxy_cache is None:
        proxy_cache = ProxyCache(UpstreamFetcher(), coalesce_misses=COALESCE_MISSES)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        app.state.proxy_cache.close()
        logger.info(f"[Server] Proxy cache closed: {app.state.proxy_cache.stats()}")

    # Every path outside /cors belongs to the static client
    app = FastAPI(
        title="WeatherStar Server",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
        lifespan=lifespan,
    )
    app.state.proxy_cache = proxy_cache
    app.state.static_resources = CaseInsensitiveResources(static_dir or STATIC_DIR)

    app.add_exception_handler(CorsProxyError, cors_proxy_error_handler)
    app.include_router(cors_router)
    app.include_router(static_router)
    return app


def parse_listen_addr(addr: str) -> Tuple[str, int]:
    """
    Split a host:port listen address (host may be empty).

    ":8080" -> ("0.0.0.0", 8080), "[::1]:9000" -> ("::1", 9000)
    """
    host, sep, port = addr.rpartition(":")
    if not sep or not port.isdigit():
        raise ValueError(f"invalid listen address {addr!r}")
    host = host.strip("[]") or "0.0.0.0"
    return host, int(port)


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="WeatherStar web client and CORS proxy")
    parser.add_argument("-addr", "--addr", default=DEFAULT_LISTEN_ADDR, help="address to listen on")
    args = parser.parse_args(argv)

    try:
        host, port = parse_listen_addr(args.addr)
    except ValueError as e:
        parser.error(str(e))

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )

    app = create_app()
    logger.info(f"[Server] listening on {args.addr}")
    # uvicorn exits the process if the socket cannot be bound
    uvicorn.run(app, host=host, port=port, log_level=LOG_LEVEL.lower())


if __name__ == "__main__":
    sys.exit(main())
