from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.error_attributes import build_error_attributes
from app.core.errors import AppError

logger = logging.getLogger(__name__)


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", "-") or "-"


def _response_headers(exc: Exception) -> dict[str, str]:
    headers: dict[str, str] = {}
    if isinstance(exc, StarletteHTTPException) and exc.headers:
        headers.update(exc.headers)
    if isinstance(exc, AppError) and exc.extra:
        if exc.http_status == 401:
            realm = exc.extra.get("realm", "anime")
            headers["WWW-Authenticate"] = f'Basic realm="{realm}"'
        if "retry_after_seconds" in exc.extra:
            headers["Retry-After"] = str(int(exc.extra["retry_after_seconds"]))
    return headers


def build_error_response(request: Request, exc: Exception) -> JSONResponse:
    attributes = build_error_attributes(exc, path=request.url.path, request_id=_request_id(request))
    return JSONResponse(status_code=attributes.status, content=attributes.to_dict(), headers=_response_headers(exc))


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        rid = _request_id(request)
        if exc.http_status >= 500:
            logger.warning("app_error", extra={"code": exc.code, "status": exc.http_status, "request_id": rid}, exc_info=exc)
        else:
            logger.info("app_error", extra={"code": exc.code, "status": exc.http_status, "request_id": rid})
        return build_error_response(request, exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        logger.info("http_exception", extra={"status": exc.status_code, "request_id": _request_id(request)})
        return build_error_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info("request_validation_error", extra={"errors": len(exc.errors()), "request_id": _request_id(request)})
        return build_error_response(request, exc)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled_exception", extra={"request_id": _request_id(request)})
        return build_error_response(request, exc)
