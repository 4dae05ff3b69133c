"""
HTTP Middleware

Request ids, cross-site request refusal, HSTS and request logging.
"""

import logging
import time
from urllib.parse import urlsplit
from uuid import uuid4

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
HSTS_VALUE = "max-age=63072000; includeSubDomains; preload"

_CSRF_SAFE_METHODS = {"GET", "HEAD", "OPTIONS", "TRACE"}
_ALLOWED_FETCH_SITES = {"same-origin", "same-site", "none"}


def is_cross_site(request: Request) -> bool:
    """
    True when a state-changing request comes from another site.

    An Origin header whose host differs from the request's Host, or a
    Sec-Fetch-Site other than same-origin/same-site/none, marks the request
    as cross-site. Requests carrying neither header are let through.
    """
    if request.method.upper() in _CSRF_SAFE_METHODS:
        return False

    origin = request.headers.get("origin")
    if origin:
        origin_host = urlsplit(origin).netloc.lower()
        host = (request.headers.get("host") or "").lower()
        if not origin_host or origin_host != host:
            return True

    fetch_site = request.headers.get("sec-fetch-site")
    if fetch_site and fetch_site.lower() not in _ALLOWED_FETCH_SITES:
        return True

    return False


def register_middleware(app: FastAPI, ApplicationConfig) -> None:
    # Registered innermost first: the request id middleware wraps everything
    if ApplicationConfig.ENABLE_LOGGING_MIDDLEWARE:

        @app.middleware("http")
        async def log_requests(request: Request, call_next):
            started = time.perf_counter()
            response = await call_next(request)
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.info(
                f"[{request.state.request_id}] {request.method} {request.url.path} "
                f"-> {response.status_code} ({elapsed_ms:.1f}ms)"
            )
            return response

    if ApplicationConfig.CSRF_PROTECTION:

        @app.middleware("http")
        async def refuse_cross_site(request: Request, call_next):
            if is_cross_site(request):
                logger.warning(
                    f"[{request.state.request_id}] Refused cross-site "
                    f"{request.method} {request.url.path}"
                )
                return JSONResponse(
                    status_code=403,
                    content={
                        "error": {
                            "code": "FORBIDDEN",
                            "message": "Cross-site request refused",
                        }
                    },
                )
            return await call_next(request)

    if ApplicationConfig.HSTS_ENABLED:

        @app.middleware("http")
        async def add_hsts(request: Request, call_next):
            response = await call_next(request)
            response.headers.setdefault("Strict-Transport-Security", HSTS_VALUE)
            return response

    @app.middleware("http")
    async def add_request_id(request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
