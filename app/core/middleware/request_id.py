from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from app.core.context import request_id_ctx_var, username_ctx_var
from app.core.security import is_valid_request_id


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Assigns the correlation id echoed in ``X-Request-ID`` and in error bodies."""

    header_name = "X-Request-ID"

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        incoming = (request.headers.get(self.header_name) or "").strip()
        rid = incoming if incoming and is_valid_request_id(incoming) else uuid.uuid4().hex
        request.state.request_id = rid
        rid_token = request_id_ctx_var.set(rid)
        user_token = username_ctx_var.set("-")
        try:
            response = await call_next(request)
        finally:
            username_ctx_var.reset(user_token)
            request_id_ctx_var.reset(rid_token)
        response.headers[self.header_name] = rid
        return response
