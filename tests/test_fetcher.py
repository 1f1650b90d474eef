import requests

from conftest import FakeSession, FakeUpstream
from video_proxy.config import BROWSER_USER_AGENT, Settings
from video_proxy.fetcher import UpstreamFetcher
from video_proxy.models import ProxyRequest, UpstreamFailure, UpstreamResponse


def make_fetcher(session: FakeSession, **settings) -> UpstreamFetcher:
    settings.setdefault("log_level", "WARNING")
    return UpstreamFetcher(Settings(**settings), session_factory=lambda: session)


def request(**kwargs) -> ProxyRequest:
    kwargs.setdefault("target_url", "https://cdn.example.com/v.mp4")
    return ProxyRequest(**kwargs)


class TestOutboundRequest:
    def test_sends_identity_and_streams(self) -> None:
        session = FakeSession(FakeUpstream())
        make_fetcher(session, connect_timeout=3, read_timeout=9).fetch(request())

        url, kwargs = session.calls[0]
        assert url == "https://cdn.example.com/v.mp4"
        assert kwargs["headers"]["User-Agent"] == BROWSER_USER_AGENT
        assert kwargs["headers"]["Accept-Encoding"] == "identity"
        assert "Range" not in kwargs["headers"]
        assert kwargs["stream"] is True
        assert kwargs["allow_redirects"] is True
        assert kwargs["timeout"] == (3, 9)

    def test_forwards_range_verbatim(self) -> None:
        session = FakeSession(FakeUpstream(status_code=206))
        make_fetcher(session).fetch(request(range_header="bytes=0-99", if_range_header='"v1"'))

        headers = session.calls[0][1]["headers"]
        assert headers["Range"] == "bytes=0-99"
        assert headers["If-Range"] == '"v1"'

    def test_custom_user_agent(self) -> None:
        session = FakeSession(FakeUpstream())
        make_fetcher(session, user_agent="Probe/1.0").fetch(request())
        assert session.calls[0][1]["headers"]["User-Agent"] == "Probe/1.0"

    def test_one_session_per_fetch(self) -> None:
        created = []

        def factory():
            s = FakeSession(FakeUpstream())
            created.append(s)
            return s

        fetcher = UpstreamFetcher(Settings(log_level="WARNING"), session_factory=factory)
        fetcher.fetch(request())
        fetcher.fetch(request())
        assert len(created) == 2


class TestSuccess:
    def test_partial_content(self) -> None:
        up = FakeUpstream(
            status_code=206,
            headers={
                "Content-Type": "video/mp4",
                "Content-Length": "100",
                "Content-Range": "bytes 0-99/1000",
                "Accept-Ranges": "bytes",
            },
            chunks=[b"x" * 100],
        )
        result = make_fetcher(FakeSession(up), chunk_size=32).fetch(request(range_header="bytes=0-99"))

        assert isinstance(result, UpstreamResponse)
        assert result.status_code == 206
        assert result.content_type == "video/mp4"
        assert result.content_length == 100
        assert result.content_range == "bytes 0-99/1000"
        assert result.accept_ranges == "bytes"
        assert b"".join(result.body) == b"x" * 100
        assert up.chunk_sizes == [32]

    def test_body_is_not_read_up_front(self) -> None:
        up = FakeUpstream(chunks=[b"a", b"b"])
        make_fetcher(FakeSession(up)).fetch(request())
        assert up.chunk_sizes == []  # generator not started yet

    def test_missing_headers_are_none(self) -> None:
        result = make_fetcher(FakeSession(FakeUpstream())).fetch(request())
        assert result.content_type is None
        assert result.content_length is None
        assert result.content_range is None
        assert result.accept_ranges is None

    def test_bad_content_length_is_dropped(self) -> None:
        up = FakeUpstream(headers={"Content-Length": "lots"})
        assert make_fetcher(FakeSession(up)).fetch(request()).content_length is None

    def test_close_releases_response_and_session(self) -> None:
        up = FakeUpstream()
        session = FakeSession(up)
        result = make_fetcher(session).fetch(request())
        assert not up.closed and not session.closed

        result.close()
        assert up.closed
        assert session.closed


class TestFailure:
    def test_error_status_is_captured(self) -> None:
        up = FakeUpstream(status_code=404, reason="Not Found")
        session = FakeSession(up)
        result = make_fetcher(session).fetch(request())

        assert result == UpstreamFailure(status=404, reason="Not Found")
        assert up.closed
        assert session.closed

    def test_non_partial_2xx_is_a_failure(self) -> None:
        result = make_fetcher(FakeSession(FakeUpstream(status_code=204))).fetch(request())
        assert isinstance(result, UpstreamFailure)
        assert result.status == 204

    def test_connection_error_maps_to_500(self) -> None:
        session = FakeSession(error=requests.ConnectionError("Name or service not known"))
        result = make_fetcher(session).fetch(request())

        assert isinstance(result, UpstreamFailure)
        assert result.status == 500
        assert "Name or service not known" in result.reason
        assert session.closed

    def test_timeout_maps_to_500(self) -> None:
        session = FakeSession(error=requests.ConnectTimeout("timed out"))
        result = make_fetcher(session).fetch(request())
        assert result.status == 500

    def test_unsupported_scheme_maps_to_500(self) -> None:
        session = FakeSession(error=requests.exceptions.InvalidSchema("No connection adapters"))
        assert make_fetcher(session).fetch(request(target_url="ftp://host/v.mp4")).status == 500
