from typing import Optional

from fastapi import APIRouter, Request

from ..headers import map_headers
from ..models import UpstreamFailure
from ..relay import Relay, RelayResponse
from ..responses import failure_response, preflight_response
from ..validation import is_preflight, validate_request

router = APIRouter(prefix="/api", tags=["proxy"])
# Path the original player client builds its proxy links against.
legacy_router = APIRouter(prefix="/functions/v1", tags=["proxy"])


def proxy_video(request: Request, url: Optional[str] = None):
    if is_preflight(request.method):
        return preflight_response()

    req = validate_request(url, request.headers)

    # Blocking; FastAPI already runs sync routes in the worker pool.
    result = request.app.state.fetcher.fetch(req)
    if isinstance(result, UpstreamFailure):
        return failure_response(result)

    headers = map_headers(result, request.app.state.header_rules)
    relay = Relay(result, label=req.target_url)
    # Status is the upstream's own: a 206 stays a 206.
    return RelayResponse(relay, status_code=result.status_code, headers=headers)


router.add_api_route("/video-proxy", proxy_video, methods=["GET", "OPTIONS"])
legacy_router.add_api_route("/video-proxy", proxy_video, methods=["GET", "OPTIONS"])
