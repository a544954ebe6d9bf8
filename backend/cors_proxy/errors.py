"""
CORS Proxy Errors

Every failure the proxy can surface to a caller. Each error carries the
HTTP status the endpoint answers with:

- 400: the target URL is malformed or not allowed
- 500: the upstream could not be fetched
"""


class CorsProxyError(Exception):
    """Base class for errors returned to the proxy caller."""

    status_code: int = 500

    def __init__(self, message: str, host: str = ""):
        super().__init__(message)
        self.message = message
        self.host = host

    def __str__(self) -> str:
        return self.message


# ============================================
# Target validation (400)
# ============================================

class ParseError(CorsProxyError):
    """The `u` parameter could not be parsed as a URL."""
    status_code = 400


class UnsupportedSchemeError(CorsProxyError):
    """The target scheme is neither http nor https."""
    status_code = 400

    def __init__(self, scheme: str = "", host: str = ""):
        super().__init__("unsupported scheme", host)
        self.scheme = scheme


class InvalidHostError(CorsProxyError):
    """The target host is not on the allow-list."""
    status_code = 400

    def __init__(self, host: str = ""):
        super().__init__("invalid host", host)


# ============================================
# Upstream fetch (500)
# ============================================

class PermanentError(CorsProxyError):
    """Upstream answered with a status that is not worth retrying."""

    def __init__(self, host: str, status: str):
        super().__init__(f"{host} says: {status}", host)
        self.status = status


class TransientError(CorsProxyError):
    """Every attempt failed with a transport error or a 5xx status."""

    def __init__(self, host: str = "", attempts: int = 0):
        super().__init__("failed to get", host)
        self.attempts = attempts


class UpstreamIOError(CorsProxyError):
    """Reading the body of a 200 response failed."""
