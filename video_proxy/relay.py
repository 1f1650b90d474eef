from typing import AsyncIterator

import requests
from loguru import logger
from starlette.concurrency import run_in_threadpool
from starlette.responses import StreamingResponse
from starlette.types import Receive, Scope, Send

from .errors import StreamFailure
from .models import UpstreamResponse

_DONE = object()


class Relay:
    """Async byte stream over an upstream body.

    A chunk is read from upstream only when the consumer asks for the next
    one, so memory stays at one chunk per request no matter the file size.
    The upstream is closed exactly once: on completion, on error, or when the
    consumer goes away.
    """

    def __init__(self, upstream: UpstreamResponse, label: str = ""):
        self._upstream = upstream
        self._label = label
        self._closed = False
        self.bytes_sent = 0
        self.completed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._stream()

    async def _stream(self) -> AsyncIterator[bytes]:
        body = self._upstream.body
        try:
            while True:
                try:
                    chunk = await run_in_threadpool(next, body, _DONE)
                except (requests.RequestException, OSError) as e:
                    logger.warning("Upstream stream broke after {} bytes ({}): {}", self.bytes_sent, self._label, e)
                    raise StreamFailure(str(e)) from e
                if chunk is _DONE:
                    self.completed = True
                    break
                if chunk:
                    self.bytes_sent += len(chunk)
                    yield chunk
        finally:
            self.close()

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        if not self.completed:
            logger.info("Relay stopped early after {} bytes ({})", self.bytes_sent, self._label)
        else:
            logger.debug("Relay finished: {} bytes ({})", self.bytes_sent, self._label)
        self._upstream.close()

    async def aclose(self) -> None:
        self.close()


class RelayResponse(StreamingResponse):
    """StreamingResponse that always releases its upstream, even if the body never starts."""

    def __init__(self, relay: Relay, status_code: int, headers=None):
        super().__init__(relay, status_code=status_code, headers=headers)
        self.relay = relay

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        try:
            await super().__call__(scope, receive, send)
        finally:
            await self.relay.aclose()
