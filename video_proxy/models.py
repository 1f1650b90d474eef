from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, Literal, Optional, Union

from pydantic import BaseModel


class ProxyMethod(str, Enum):
    GET = "GET"
    OPTIONS = "OPTIONS"


class ProxyRequest(BaseModel):
    target_url: str
    range_header: Optional[str] = None
    if_range_header: Optional[str] = None
    method: ProxyMethod = ProxyMethod.GET


@dataclass(frozen=True)
class UpstreamResponse:
    status_code: int
    body: Iterator[bytes]            # single pass, owned by whoever relays it
    close: Callable[[], None]        # releases the outbound connection
    content_type: Optional[str] = None
    content_length: Optional[int] = None
    content_range: Optional[str] = None
    accept_ranges: Optional[str] = None


@dataclass(frozen=True)
class UpstreamFailure:
    status: int
    reason: str


FetchResult = Union[UpstreamResponse, UpstreamFailure]


class EmbedTarget(BaseModel):
    type: Literal["iframe", "video"]
    src: str
