"""
Upstream allow-list

Only the weather, tide and air-quality providers the client talks to may be
proxied. Hosts must match exactly (including any explicit port); there is no
wildcard or subdomain matching.
"""

from typing import FrozenSet
from urllib.parse import urlsplit, SplitResult

import httpx

from .errors import ParseError, UnsupportedSchemeError, InvalidHostError

ALLOWED_SCHEMES: FrozenSet[str] = frozenset({"http", "https"})

ALLOWED_HOSTS: FrozenSet[str] = frozenset({
    "forecast.weather.gov",
    "api.weather.com",
    "www.aviationweather.gov",
    "www.wunderground.com",
    "api-ak.wunderground.com",
    "tidesandcurrents.noaa.gov",
    "l-36.com",
    "airquality.weather.gov",
    "airnow.gov",
    "www.airnowapi.org",
    "alerts.weather.gov",
    "mesonet.agron.iastate.edu",
    "tgftp.nws.noaa.gov",
    "www.cpc.ncep.noaa.gov",
    "radar.weather.gov",
    "www2.ehs.niu.edu",
    "api.usno.navy.mil",
})


def target_host(target: SplitResult) -> str:
    """Host as written in the URL, port included, userinfo stripped."""
    return target.netloc.rpartition("@")[2]


def parse_target(raw_url: str) -> SplitResult:
    """
    Parse the raw `u` query value.

    Raises:
        ParseError: if the value is not a well-formed URL.
    """
    if any(ord(c) < 0x20 or ord(c) == 0x7f for c in raw_url):
        raise ParseError(f"parse {raw_url!r}: invalid control character in URL")
    try:
        target = urlsplit(raw_url)
        # Accessing .port validates it
        target.port
        # Same rules the outbound client applies
        httpx.URL(raw_url)
    except (ValueError, httpx.InvalidURL) as e:
        raise ParseError(f"parse {raw_url!r}: {e}")
    return target


def validate_target(target: SplitResult) -> None:
    """
    Check a parsed target against the allowed schemes and hosts.

    Raises:
        UnsupportedSchemeError: scheme is not exactly http or https
        InvalidHostError: host is not on the allow-list
    """
    host = target_host(target)
    if target.scheme not in ALLOWED_SCHEMES:
        raise UnsupportedSchemeError(target.scheme, host)
    if host not in ALLOWED_HOSTS:
        raise InvalidHostError(host)
