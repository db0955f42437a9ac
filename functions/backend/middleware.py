"""
HTTP middleware: fixed CORS headers and request logging.
"""

from __future__ import annotations

import logging
import time

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import PlainTextResponse, Response

logger = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


class CorsMiddleware(BaseHTTPMiddleware):
    """
    Answers every OPTIONS preflight with "ok" and stamps the same CORS
    headers on all other responses.
    """

    async def dispatch(self, request: Request, call_next):
        if request.method == "OPTIONS":
            return PlainTextResponse("ok", headers=CORS_HEADERS)
        response: Response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        return response


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, status code and response time of each request.
    """

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        method = request.method
        path = request.url.path

        try:
            response: Response = await call_next(request)
        except Exception as e:
            process_time = (time.time() - start_time) * 1000
            logger.error(
                "%s %s | ERROR: %s | Time: %.2fms", method, path, e, process_time,
                exc_info=True,
            )
            raise

        process_time = (time.time() - start_time) * 1000
        status_code = response.status_code
        log_level = logging.INFO
        if status_code >= 500:
            log_level = logging.ERROR
        elif status_code >= 400:
            log_level = logging.WARNING

        logger.log(
            log_level,
            "%s %s | Status: %s | Time: %.2fms",
            method,
            path,
            status_code,
            process_time,
        )
        return response
