from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from http import HTTPStatus
from typing import Any

from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.errors import (
    ACCESS_DENIED,
    AUTHENTICATION,
    HTTP,
    INTERNAL,
    NOT_FOUND,
    RATE_LIMITED,
    VALIDATION,
    AppError,
    InternalError,
)

DEVELOPER_MESSAGES: dict[str, str] = {
    NOT_FOUND: "A ResponseStatusException Happened",
    VALIDATION: "A ValidationException Happened",
    AUTHENTICATION: "An AuthenticationException Happened",
    ACCESS_DENIED: "An AccessDeniedException Happened",
    RATE_LIMITED: "A RateLimitException Happened",
    HTTP: "An HttpException Happened",
    INTERNAL: "An UnexpectedException Happened",
}

_CODES_BY_STATUS: dict[int, str] = {
    400: VALIDATION,
    401: AUTHENTICATION,
    403: ACCESS_DENIED,
    429: RATE_LIMITED,
}


@dataclass(frozen=True)
class ErrorAttributes:
    timestamp: str
    status: int
    error: str
    exception: str
    message: str
    developer_message: str
    path: str
    request_id: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "path": self.path,
            "status": self.status,
            "error": self.error,
            "exception": self.exception,
            "message": self.message,
            "developerMessage": self.developer_message,
            "requestId": self.request_id,
        }


def _qualified_name(exc: BaseException) -> str:
    cls = type(exc)
    return f"{cls.__module__}.{cls.__qualname__}"


def _reason_phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Unknown"


def _validation_message(exc: RequestValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        parts.append(f"{loc}: {msg}" if loc else str(msg))
    return "; ".join(parts) or "Invalid request"


def _classify(exc: BaseException) -> tuple[int, str, str]:
    if isinstance(exc, AppError):
        return exc.http_status, exc.code, exc.message
    if isinstance(exc, RequestValidationError):
        return 400, VALIDATION, _validation_message(exc)
    if isinstance(exc, StarletteHTTPException):
        status = int(exc.status_code)
        code = _CODES_BY_STATUS.get(status, HTTP)
        return status, code, str(exc.detail or _reason_phrase(status))
    safe = InternalError()
    return safe.http_status, safe.code, safe.message


def build_error_attributes(
    exc: BaseException,
    *,
    path: str,
    request_id: str = "-",
    now: datetime | None = None,
) -> ErrorAttributes:
    """Translate the failure that ended a request into the public error body.

    Pure: the result depends only on the arguments. Unclassified failures are
    reported as 500 with a generic message; their class name is still kept in
    ``exception`` so operators can correlate with the logs.
    """
    status, code, message = _classify(exc)
    ts = (now or datetime.now(timezone.utc)).isoformat()
    return ErrorAttributes(
        timestamp=ts,
        status=status,
        error=_reason_phrase(status),
        exception=_qualified_name(exc),
        message=message,
        developer_message=DEVELOPER_MESSAGES.get(code, DEVELOPER_MESSAGES[HTTP]),
        path=path,
        request_id=request_id,
    )
