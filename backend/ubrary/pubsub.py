from __future__ import annotations

import json
import logging
import os
from contextlib import suppress
from datetime import datetime
from typing import Any, AsyncIterator
from uuid import UUID

import redis.asyncio as redis

REDIS_URL = os.getenv("REDIS_URL", "redis://localhost:6379/0")
_redis = None

logger = logging.getLogger(__name__)


async def get_redis():
    global _redis
    if _redis is None:
        if os.getenv("TESTING") == "1":
            from fakeredis import aioredis
            _redis = aioredis.FakeRedis()
        else:
            _redis = redis.from_url(REDIS_URL)
    return _redis


def _json_default(value: Any) -> Any:
    # purpose: convert datetime and uuid values for event payloads
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    return value


def _serialize_event(event: dict[str, Any]) -> str:
    return json.dumps(event, default=_json_default)


def document_channel(document_id: str | UUID) -> str:
    return f"document:{document_id}"


async def publish_document_event(document_id: str | UUID, event: dict[str, Any]) -> None:
    """Broadcast a committed workflow event; delivery failures are only logged."""

    try:
        r = await get_redis()
        await r.publish(document_channel(document_id), _serialize_event(event))
    except Exception:
        logger.warning("Publishing workflow event for %s failed", document_id, exc_info=True)


async def iter_document_events(document_id: str | UUID) -> AsyncIterator[str]:
    """Yield workflow messages for one document as a stream."""

    r = await get_redis()
    channel = document_channel(document_id)
    pubsub = r.pubsub()
    await pubsub.subscribe(channel)
    try:
        async for message in pubsub.listen():
            if message.get("type") != "message":
                continue
            data = message.get("data")
            if isinstance(data, bytes):
                yield data.decode()
            else:
                yield str(data)
    finally:
        with suppress(Exception):
            await pubsub.unsubscribe(channel)
        with suppress(AttributeError):
            await pubsub.close()
