from __future__ import annotations

from typing import Any

NOT_FOUND = "not_found"
VALIDATION = "validation"
AUTHENTICATION = "authentication"
ACCESS_DENIED = "access_denied"
RATE_LIMITED = "rate_limited"
HTTP = "http"
INTERNAL = "internal"


class AppError(Exception):
    """Base for failures that carry their own HTTP status.

    ``code`` names the error kind and selects the developer message written
    into the error body; ``message`` is the client-facing text.
    """

    def __init__(
        self,
        *,
        code: str,
        http_status: int,
        message: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message or code)
        self.code = code
        self.http_status = http_status
        self.message = message or code
        self.extra = extra

    def __str__(self) -> str:
        return self.message


class AnimeNotFoundError(AppError):
    def __init__(self, message: str = "Anime not found") -> None:
        super().__init__(code=NOT_FOUND, http_status=404, message=message)


class AnimeValidationError(AppError):
    def __init__(self, message: str = "Invalid Name") -> None:
        super().__init__(code=VALIDATION, http_status=400, message=message)


class AuthenticationRequiredError(AppError):
    def __init__(self, message: str = "Full authentication is required to access this resource", *, realm: str = "anime") -> None:
        super().__init__(code=AUTHENTICATION, http_status=401, message=message, extra={"realm": realm})


class AccessDeniedError(AppError):
    def __init__(self, message: str = "Access Denied") -> None:
        super().__init__(code=ACCESS_DENIED, http_status=403, message=message)


class RateLimitedError(AppError):
    def __init__(self, retry_after_seconds: int) -> None:
        super().__init__(
            code=RATE_LIMITED,
            http_status=429,
            message="Too many requests",
            extra={"retry_after_seconds": retry_after_seconds},
        )


class InternalError(AppError):
    def __init__(self, message: str = "An unexpected error occurred") -> None:
        super().__init__(code=INTERNAL, http_status=500, message=message)
