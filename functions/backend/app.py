"""
FastAPI application entry point for the news functions backend.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from backend.config import get_settings
from backend.intake import IntakeError
from backend.middleware import CORS_HEADERS, CorsMiddleware, RequestLoggingMiddleware
from backend.routes import router
from backend.schemas import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Missing secrets are fatal at process start.
    get_settings().validate_startup()
    yield


async def handle_intake_error(request: Request, exc: IntakeError) -> JSONResponse:
    body = ErrorResponse(error=str(exc))
    return JSONResponse(status_code=400, content=body.model_dump(exclude_none=True))


async def handle_malformed_payload(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.error("Malformed payload on %s: %s", request.url.path, exc.errors())
    body = ErrorResponse(error="Malformed request payload", details=str(exc))
    return JSONResponse(status_code=500, content=body.model_dump())


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    # Runs in ServerErrorMiddleware, outside CorsMiddleware.
    logger.error("Unhandled error on %s", request.url.path, exc_info=exc)
    body = ErrorResponse(error="Internal server error", details=str(exc))
    return JSONResponse(
        status_code=500, content=body.model_dump(), headers=CORS_HEADERS
    )


def create_app() -> FastAPI:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
    )
    app = FastAPI(title="News Functions", version="0.1.0", lifespan=lifespan)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorsMiddleware)
    app.add_exception_handler(IntakeError, handle_intake_error)
    app.add_exception_handler(RequestValidationError, handle_malformed_payload)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()
