"""
Shared fixtures: a fake `requests` upstream and a TestClient wired to it.

The fake session records what the fetcher sent and hands back a scripted
response, so no test touches the network.
"""

from typing import Iterable, List, Optional

import pytest
from fastapi.testclient import TestClient
from requests.structures import CaseInsensitiveDict

from video_proxy.config import Settings
from video_proxy.main import create_app


class FakeUpstream:
    """Stands in for a streamed requests.Response."""

    def __init__(self, status_code: int = 200, headers: Optional[dict] = None,
                 chunks: Iterable = (), reason: str = "OK"):
        self.status_code = status_code
        self.headers = CaseInsensitiveDict(headers or {})
        self.reason = reason
        self._chunks = chunks
        self.chunk_sizes: List[int] = []
        self.close_calls = 0

    @property
    def closed(self) -> bool:
        return self.close_calls > 0

    def iter_content(self, chunk_size: int = 1):
        self.chunk_sizes.append(chunk_size)
        for chunk in self._chunks:
            if isinstance(chunk, Exception):
                raise chunk
            yield chunk

    def close(self):
        self.close_calls += 1


class FakeSession:
    def __init__(self, response: Optional[FakeUpstream] = None, error: Optional[Exception] = None):
        self.response = response
        self.error = error
        self.calls: List[tuple] = []
        self.closed = False

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


class Backend:
    """Hands out one FakeSession per fetch, like requests.Session would."""

    def __init__(self):
        self.response: Optional[FakeUpstream] = FakeUpstream(
            headers={"Content-Type": "video/mp4", "Content-Length": "4"}, chunks=[b"abcd"]
        )
        self.error: Optional[Exception] = None
        self.sessions: List[FakeSession] = []

    def respond(self, **kwargs) -> FakeUpstream:
        self.response = FakeUpstream(**kwargs)
        self.error = None
        return self.response

    def fail(self, error: Exception):
        self.error = error

    def __call__(self) -> FakeSession:
        session = FakeSession(self.response, self.error)
        self.sessions.append(session)
        return session

    @property
    def last_call(self):
        return self.sessions[-1].calls[-1]


@pytest.fixture
def settings() -> Settings:
    return Settings(log_level="WARNING", chunk_size=4, connect_timeout=2, read_timeout=7)


@pytest.fixture
def backend() -> Backend:
    return Backend()


@pytest.fixture
def app(settings, backend):
    return create_app(settings, session_factory=backend)


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)
