from typing import Callable, Dict, Optional

import requests
from loguru import logger

from .config import Settings
from .models import FetchResult, ProxyRequest, UpstreamFailure, UpstreamResponse

SUCCESS_STATUSES = frozenset({200, 206})
NO_RESPONSE_STATUS = 500


def _parse_length(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        n = int(value.strip())
    except ValueError:
        return None
    return n if n >= 0 else None


class UpstreamFetcher:
    """Opens one outbound GET per proxied request.

    Each fetch gets its own session so nothing is pooled across requests.
    """

    def __init__(self, settings: Settings, session_factory: Callable[[], requests.Session] = requests.Session):
        self.settings = settings
        self.session_factory = session_factory

    def build_headers(self, req: ProxyRequest) -> Dict[str, str]:
        # Forward only what the client asked. Do not fabricate ranges.
        headers = {
            "User-Agent": self.settings.user_agent,
            "Accept": "*/*",
            "Accept-Encoding": "identity",
        }
        if req.range_header:
            headers["Range"] = req.range_header
        if req.if_range_header:
            headers["If-Range"] = req.if_range_header
        return headers

    def fetch(self, req: ProxyRequest) -> FetchResult:
        headers = self.build_headers(req)
        logger.info("Proxying video from: {}", req.target_url)
        if req.range_header:
            logger.debug("Range request: {}", req.range_header)

        session = self.session_factory()
        try:
            upstream = session.get(
                req.target_url,
                headers=headers,
                stream=True,
                allow_redirects=True,
                timeout=(self.settings.connect_timeout, self.settings.read_timeout),
            )
        except requests.RequestException as e:
            session.close()
            logger.warning("Upstream fetch failed for {}: {}", req.target_url, e)
            return UpstreamFailure(status=NO_RESPONSE_STATUS, reason=str(e))
        except Exception:
            session.close()
            raise

        status = upstream.status_code
        if status not in SUCCESS_STATUSES:
            reason = getattr(upstream, "reason", None) or "Upstream error"
            _close(upstream, session)
            logger.warning("Failed to fetch video: {} {} ({})", status, reason, req.target_url)
            return UpstreamFailure(status=status, reason=reason)

        content_type = upstream.headers.get("Content-Type")
        content_length = upstream.headers.get("Content-Length")
        logger.debug("Video content type: {}", content_type)
        logger.debug("Video content length: {}", content_length)

        return UpstreamResponse(
            status_code=status,
            body=upstream.iter_content(chunk_size=self.settings.chunk_size),
            close=lambda: _close(upstream, session),
            content_type=content_type,
            content_length=_parse_length(content_length),
            content_range=upstream.headers.get("Content-Range"),
            accept_ranges=upstream.headers.get("Accept-Ranges"),
        )


def _close(upstream, session) -> None:
    try:
        upstream.close()
    finally:
        session.close()
