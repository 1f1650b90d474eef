from typing import Mapping, Optional
from urllib.parse import urlsplit

from .errors import InvalidTarget, MissingTarget
from .models import ProxyMethod, ProxyRequest


def is_preflight(method: str) -> bool:
    return method.upper() == ProxyMethod.OPTIONS.value


def validate_request(url: Optional[str], headers: Mapping[str, str]) -> ProxyRequest:
    """Turn the inbound `url` param and headers into a ProxyRequest.

    Only presence and absolute-URL shape are checked. Any scheme or host the
    caller names is fetched.
    """
    target = (url or "").strip()
    if not target:
        raise MissingTarget()

    try:
        parts = urlsplit(target)
    except ValueError:
        raise InvalidTarget()
    if not parts.scheme or not parts.netloc:
        raise InvalidTarget()

    return ProxyRequest(
        target_url=target,
        range_header=headers.get("range") or None,
        if_range_header=headers.get("if-range") or None,
        method=ProxyMethod.GET,
    )
