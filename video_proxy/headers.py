"""
Outbound header mapping.

Upstream metadata is translated through a small ordered rule table:

- PASSTHROUGH: copy the upstream value, omit the header if upstream has none.
- DEFAULT: copy the upstream value when present and acceptable, else use the
  rule's value.
- FIXED: always use the rule's value.

Cross-origin headers are added on top of every response, errors included.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Callable, Dict, Mapping, Optional, Tuple

from .models import UpstreamResponse

CORS_HEADERS: Mapping[str, str] = MappingProxyType({
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type, range",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Expose-Headers": "Content-Length, Content-Range, Accept-Ranges",
})

DEFAULT_VIDEO_TYPE = "video/mp4"


class RuleMode(str, Enum):
    PASSTHROUGH = "passthrough"
    DEFAULT = "default"
    FIXED = "fixed"


@dataclass(frozen=True)
class HeaderRule:
    name: str
    mode: RuleMode
    value: Optional[str] = None
    accept: Optional[Callable[[str], bool]] = None


def _is_video_type(value: str) -> bool:
    return "video" in value.lower()


def header_rules(cache_control: str = "public, max-age=3600") -> Tuple[HeaderRule, ...]:
    return (
        HeaderRule("Content-Type", RuleMode.DEFAULT, DEFAULT_VIDEO_TYPE, accept=_is_video_type),
        HeaderRule("Accept-Ranges", RuleMode.DEFAULT, "bytes"),
        HeaderRule("Content-Length", RuleMode.PASSTHROUGH),
        HeaderRule("Content-Range", RuleMode.PASSTHROUGH),
        HeaderRule("Cache-Control", RuleMode.FIXED, cache_control),
    )


DEFAULT_RULES = header_rules()


def upstream_values(upstream: UpstreamResponse) -> Dict[str, Optional[str]]:
    length = upstream.content_length
    return {
        "Content-Type": upstream.content_type,
        "Accept-Ranges": upstream.accept_ranges,
        "Content-Length": str(length) if length is not None else None,
        "Content-Range": upstream.content_range,
    }


def apply_rules(source: Mapping[str, Optional[str]], rules: Tuple[HeaderRule, ...]) -> Dict[str, str]:
    out: Dict[str, str] = {}
    for rule in rules:
        current = source.get(rule.name)
        if rule.mode is RuleMode.FIXED:
            out[rule.name] = rule.value
        elif rule.mode is RuleMode.DEFAULT:
            if current and (rule.accept is None or rule.accept(current)):
                out[rule.name] = current
            else:
                out[rule.name] = rule.value
        elif current:
            out[rule.name] = current
    return out


def with_cors(headers: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    out = dict(CORS_HEADERS)
    if headers:
        out.update(headers)
    return out


def map_headers(upstream: UpstreamResponse, rules: Tuple[HeaderRule, ...] = DEFAULT_RULES) -> Dict[str, str]:
    return with_cors(apply_rules(upstream_values(upstream), rules))
