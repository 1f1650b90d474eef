from typing import Any, Dict, Mapping, Optional

from fastapi import Response
from fastapi.responses import JSONResponse

from .headers import with_cors
from .models import UpstreamFailure


def preflight_response() -> Response:
    return Response(status_code=204, headers=with_cors())


def json_error(status_code: int, payload: Dict[str, Any], headers: Optional[Mapping[str, str]] = None) -> JSONResponse:
    return JSONResponse(payload, status_code=status_code, headers=with_cors(headers))


BODYLESS_STATUSES = frozenset({204, 205, 304})


def failure_status(failure: UpstreamFailure) -> int:
    # Mirror the upstream status unless it cannot carry the JSON error body.
    if failure.status < 200 or failure.status in BODYLESS_STATUSES:
        return 502
    return failure.status


def failure_response(failure: UpstreamFailure) -> JSONResponse:
    return json_error(failure_status(failure), {"error": "Failed to fetch video", "status": failure.status})
