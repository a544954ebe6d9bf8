"""
CORS 代理测试配置文件

Shared pytest fixtures for the proxy, static site and station tests.

关键概念：
- Upstream providers are never contacted: every UpstreamFetcher is built on
  an httpx.MockTransport fed by a scripted UpstreamStub
- FakeClock lets tests move time past a cache entry's expiry
"""

import sys
import threading
from pathlib import Path
from typing import Callable, List, Union

import httpx
import pytest

# 添加 backend 目录到 Python 路径
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from cors_proxy import ProxyCache, UpstreamFetcher
from weatherstar_server import create_app


# ============================================
# Helpers
# ============================================

Scripted = Union[int, httpx.Response, Exception, Callable[[httpx.Request], httpx.Response]]


class UpstreamStub:
    """
    Scripted upstream for httpx.MockTransport.

    Each request consumes the next scripted item:
    - int: respond with that status (body "body-<n>" for 200)
    - httpx.Response: returned as is
    - Exception: raised (use httpx.ConnectError for transport failures)
    - callable: called with the request

    When the script runs out the last item repeats.
    """

    def __init__(self, *script: Scripted):
        self.script: List[Scripted] = list(script) or [200]
        self.requests: List[httpx.Request] = []
        self._lock = threading.Lock()

    @property
    def calls(self) -> int:
        return len(self.requests)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        with self._lock:
            self.requests.append(request)
            n = len(self.requests)
            item = self.script[min(n, len(self.script)) - 1]

        if isinstance(item, Exception):
            raise item
        if isinstance(item, httpx.Response):
            return item
        if callable(item):
            return item(request)
        body = f"body-{n}".encode() if item == 200 else b"upstream error"
        return httpx.Response(item, content=body)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_fetcher(stub: UpstreamStub, max_attempts: int = 3) -> UpstreamFetcher:
    return UpstreamFetcher(max_attempts=max_attempts, transport=httpx.MockTransport(stub))


# ============================================
# Fixtures
# ============================================

@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def upstream():
    """A stub answering 200 with a numbered body for every request."""
    return UpstreamStub(200)


@pytest.fixture
def proxy_cache(upstream, clock):
    cache = ProxyCache(make_fetcher(upstream), clock=clock)
    yield cache
    cache.close()


@pytest.fixture
def static_dir(tmp_path):
    """
    A resource tree with mixed-case names.

    tmp/
    ├── index.html
    ├── foo.js
    └── Images/
        ├── index.html
        └── Logo.PNG
    """
    (tmp_path / "index.html").write_text("<html>root</html>")
    (tmp_path / "foo.js").write_text("console.log('foo');")
    images = tmp_path / "Images"
    images.mkdir()
    (images / "index.html").write_text("<html>images</html>")
    (images / "Logo.PNG").write_bytes(b"\x89PNG fake")
    return tmp_path


@pytest.fixture
def client(proxy_cache, static_dir):
    from fastapi.testclient import TestClient

    app = create_app(proxy_cache=proxy_cache, static_dir=static_dir)
    return TestClient(app)
