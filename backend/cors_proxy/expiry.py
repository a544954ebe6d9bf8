"""How long a proxied response stays fresh, per upstream host."""

from datetime import timedelta
from typing import Dict

DEFAULT_TTL = timedelta(hours=1)

HOST_TTL_OVERRIDES: Dict[str, timedelta] = {
    "www2.ehs.niu.edu": timedelta(minutes=5),
    "api.usno.navy.mil": timedelta(hours=3),
}


def ttl_for_host(host: str) -> timedelta:
    return HOST_TTL_OVERRIDES.get(host, DEFAULT_TTL)
