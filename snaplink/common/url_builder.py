"""Short URL composition."""

from typing import Mapping, Optional

from ..config import Config


def _first_hop(value: str) -> str:
    # Chained proxies append to the header; the left-most entry faced the client
    return value.split(",")[0].strip()


def build_short_url(
    short_code: str,
    config: Config,
    headers: Optional[Mapping[str, str]] = None,
    request_scheme: Optional[str] = None,
) -> str:
    """Compose the public URL that resolves ``short_code``.

    The origin is taken from ``X-Forwarded-Proto`` and ``X-Forwarded-Host``
    when a proxy sets both, then from the request's scheme and ``Host``,
    and finally from ``config.base_url``. ``config.path_prefix`` goes
    between the origin and the code.
    """
    lowered = {k.lower(): v for k, v in (headers or {}).items()}
    proto = lowered.get("x-forwarded-proto")
    forwarded_host = lowered.get("x-forwarded-host")
    host = lowered.get("host")

    if proto and forwarded_host:
        origin = f"{_first_hop(proto)}://{_first_hop(forwarded_host)}"
    elif request_scheme and host:
        origin = f"{request_scheme}://{host}"
    else:
        origin = config.base_url.rstrip("/")

    prefix = config.path_prefix.strip("/")
    return "/".join(part for part in (origin, prefix, short_code) if part)
