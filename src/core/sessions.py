import json
import uuid
from typing import Optional

import structlog
from fastapi import HTTPException

from core.config import settings
from core.redis import redis


log = structlog.get_logger()


async def save_session(kind: str, sid: str, owner_id: str, state: dict) -> None:
    """Stores a wizard snapshot under ``{kind}:{sid}``, refreshing its TTL."""
    key = f"{kind}:{sid}"
    await redis.set(key, json.dumps({"owner": owner_id, "state": state}, default=str))
    await redis.expire(key, settings.WIZARD_TTL_SECONDS)


async def open_session(kind: str, owner_id: str, state: dict) -> str:
    sid = str(uuid.uuid4())
    await save_session(kind, sid, owner_id, state)
    log.info("wizard.opened", kind=kind, sid=sid, owner=owner_id)
    return sid


async def load_session(kind: str, sid: str, owner_id: str) -> dict:
    raw = await redis.get(f"{kind}:{sid}")
    if raw is None:
        raise HTTPException(404, "Session not found or expired")
    data = json.loads(raw)
    # sessions are private to whoever opened them
    if data.get("owner") != owner_id:
        raise HTTPException(404, "Session not found or expired")
    return data["state"]


async def close_session(kind: str, sid: str) -> None:
    await redis.delete(f"{kind}:{sid}")
    log.info("wizard.closed", kind=kind, sid=sid)


async def discard_session(kind: str, sid: str, owner_id: str) -> bool:
    """Closes a session if it still exists and belongs to ``owner_id``."""
    raw = await redis.get(f"{kind}:{sid}")
    if raw is None or json.loads(raw).get("owner") != owner_id:
        return False
    await close_session(kind, sid)
    return True


async def get_value(key: str) -> Optional[dict]:
    raw = await redis.get(key)
    return json.loads(raw) if raw else None


async def set_value(key: str, value: dict) -> None:
    await redis.set(key, json.dumps(value, default=str))
    await redis.expire(key, settings.WIZARD_TTL_SECONDS)
