from __future__ import annotations

import re

from fastapi import Request

_REQ_ID_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9\-_.]{7,63}$")


def is_valid_request_id(value: str) -> bool:
    return bool(_REQ_ID_RE.fullmatch(value))


def get_client_ip(request: Request, *, trusted_proxy_headers: bool) -> str:
    if trusted_proxy_headers:
        xff = request.headers.get("x-forwarded-for", "")
        if xff:
            ip = xff.split(",")[0].strip()
            if ip:
                return ip
        xrip = request.headers.get("x-real-ip", "").strip()
        if xrip:
            return xrip

    client = request.client
    if client and client.host:
        return client.host
    return "-"


def parse_authorities(raw: str | None) -> tuple[str, ...]:
    """Split a stored ``ROLE_A,ROLE_B`` authority string."""
    if not raw:
        return ()
    return tuple(a.strip() for a in raw.split(",") if a.strip())


def roles_from_authorities(authorities: tuple[str, ...]) -> frozenset[str]:
    return frozenset(a[len("ROLE_"):] if a.startswith("ROLE_") else a for a in authorities)
