from __future__ import annotations

import asyncio
import logging

import redis.asyncio as redis_async

from app.core.config import Settings

logger = logging.getLogger(__name__)


async def create_redis_client(settings: Settings) -> redis_async.Redis | None:
    dsn = settings.redis_dsn_plain()
    if not dsn:
        return None
    client = redis_async.Redis.from_url(
        dsn,
        socket_connect_timeout=float(settings.redis_connect_timeout_seconds),
        socket_timeout=float(settings.redis_operation_timeout_seconds),
        retry_on_timeout=True,
        health_check_interval=10,
        decode_responses=False,
    )
    try:
        await asyncio.wait_for(client.ping(), timeout=float(settings.redis_connect_timeout_seconds))
    except Exception as exc:  # noqa: BLE001
        logger.warning("redis_unavailable", extra={"reason": str(exc)})
        await close_redis_client(client)
        return None
    return client


async def close_redis_client(client: redis_async.Redis | None) -> None:
    if client is None:
        return
    try:
        await client.aclose(close_connection_pool=True)
    except Exception as exc:  # noqa: BLE001
        logger.warning("redis_close_failed", extra={"reason": str(exc)})
