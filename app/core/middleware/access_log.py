from __future__ import annotations

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.config import get_settings
from app.core.context import client_ip_ctx_var
from app.core.security import get_client_ip

logger = logging.getLogger(__name__)

_QUIET_PATHS = frozenset({"/healthz"})


class AccessLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        settings = get_settings()
        client_ip_ctx_var.set(get_client_ip(request, trusted_proxy_headers=settings.trusted_proxy_headers))

        started = time.monotonic()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            path = request.url.path
            if path.removeprefix(settings.api_prefix) not in _QUIET_PATHS:
                principal = getattr(request.state, "principal", None)
                logger.log(
                    logging.WARNING if status_code >= 500 else logging.INFO,
                    "http_request",
                    extra={
                        "http_method": request.method,
                        "http_path": path,
                        "http_status": status_code,
                        "duration_ms": int((time.monotonic() - started) * 1000),
                        "principal": principal.username if principal is not None else "-",
                    },
                )
