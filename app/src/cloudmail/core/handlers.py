"""例外を `{"error": ...}` エンベロープへ変換する FastAPI 例外ハンドラ。"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from cloudmail.core.errors import CloudMailError, InternalError, ValidationError
from cloudmail.core.logging import log_error, log_event

NOT_FOUND_MESSAGE = "Endpoint not found"
INVALID_BODY_MESSAGE = "Invalid request body"
INTERNAL_ERROR_MESSAGE = "Internal server error"


def _envelope(status_code: int, message: str) -> JSONResponse:
    return JSONResponse({"error": message}, status_code=status_code)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-")


async def handle_cloudmail_error(request: Request, exc: CloudMailError) -> JSONResponse:
    if isinstance(exc, ValidationError):
        return _envelope(400, exc.message)

    if isinstance(exc, InternalError):
        log_error(
            path=request.url.path,
            status=500,
            request_id=_request_id(request),
            error=repr(exc.__cause__ or exc),
        )
    else:
        log_event(
            "provider_failure",
            level=logging.WARNING,
            path=request.url.path,
            request_id=_request_id(request),
            error_type=type(exc).__name__,
            message=exc.message,
            failed_recipients=list(exc.failed_recipients),
        )
    return _envelope(500, exc.message)


async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    # メソッド違いも含め、一致するルートが無いものは 404 に揃える
    if exc.status_code in (404, 405):
        return _envelope(404, NOT_FOUND_MESSAGE)
    return _envelope(exc.status_code, str(exc.detail))


async def handle_request_validation(request: Request, exc: Exception) -> JSONResponse:
    return _envelope(400, INVALID_BODY_MESSAGE)


async def handle_unexpected(request: Request, exc: Exception) -> JSONResponse:
    log_error(
        path=request.url.path,
        status=500,
        request_id=_request_id(request),
        error=repr(exc),
    )
    return _envelope(500, INTERNAL_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CloudMailError, handle_cloudmail_error)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, handle_request_validation)
    app.add_exception_handler(Exception, handle_unexpected)
