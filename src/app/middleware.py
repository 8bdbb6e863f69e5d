"""
HTTP middleware: 요청 로깅 + 캐시 헤더.

캐시 정책:
- Cache-Control 없는 응답 → no-cache, no-store, must-revalidate
- /static/{css,js,icons,fonts}... → public, max-age=31536000
"""

import logging
import time
from collections.abc import Awaitable, Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from src.domain.constants import LONG_CACHE, LONG_CACHE_STATIC_PREFIXES, NO_CACHE

logger = logging.getLogger(__name__)

STATIC_PREFIX = "/static/"


def cache_control_for(path: str) -> str:
    """요청 경로의 Cache-Control 값."""
    if path.startswith(STATIC_PREFIX):
        asset_path = path[len(STATIC_PREFIX):]
        if asset_path.startswith(LONG_CACHE_STATIC_PREFIXES):
            return LONG_CACHE
    return NO_CACHE


class CacheControlMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        response = await call_next(request)
        if request.url.path.startswith(STATIC_PREFIX):
            response.headers["Cache-Control"] = cache_control_for(request.url.path)
        elif "cache-control" not in response.headers:
            response.headers["Cache-Control"] = NO_CACHE
        return response


class RequestLogMiddleware(BaseHTTPMiddleware):
    """요청당 로그 1줄: method, path, status, 소요 시간."""

    async def dispatch(
        self,
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed_ms = (time.perf_counter() - started) * 1000
            logger.exception(
                f"{request.method} {request.url.path} failed after {elapsed_ms:.1f}ms"
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} "
            f"({elapsed_ms:.1f}ms)"
        )
        return response
