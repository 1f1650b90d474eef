from typing import Callable, Optional

import requests
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings, load_settings
from .errors import ClientError, InternalError
from .fetcher import UpstreamFetcher
from .headers import header_rules
from .logging_config import configure_logging
from .responses import json_error
from .routes.core import router as core_router
from .routes.proxy import legacy_router as proxy_legacy_router
from .routes.proxy import router as proxy_router


async def _client_error(request: Request, exc: ClientError):
    return json_error(exc.status_code, exc.payload())


async def _http_error(request: Request, exc: StarletteHTTPException):
    return json_error(exc.status_code, {"error": exc.detail}, headers=exc.headers)


async def _validation_error(request: Request, exc: RequestValidationError):
    return json_error(422, {"error": "Invalid request", "details": str(exc)})


async def _internal_error(request: Request, exc: Exception):
    logger.exception("Video proxy error: {}", exc)
    err = InternalError(str(exc) or exc.__class__.__name__)
    return json_error(err.status_code, err.payload())


def create_app(
    settings: Optional[Settings] = None,
    session_factory: Callable[[], requests.Session] = requests.Session,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level, settings.log_file)

    app = FastAPI(title="Video Proxy")
    app.state.settings = settings
    app.state.fetcher = UpstreamFetcher(settings, session_factory=session_factory)
    app.state.header_rules = header_rules(settings.cache_control)

    app.add_exception_handler(ClientError, _client_error)
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _internal_error)

    app.include_router(core_router)
    app.include_router(proxy_router)
    app.include_router(proxy_legacy_router)
    return app
