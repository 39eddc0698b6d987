"""Cache keys and generation stamps for enrollment read endpoints.

Every write of an event replaces its generation token. A cached roster is
served only while the token it was read under is still current, so a read
that races a write can never pin the old roster in the cache.
"""

from uuid import uuid4

from django.conf import settings
from django.core.cache import cache


def event_cache_key(event_id: object) -> str:
    return f"events:{event_id}"


def event_generation_key(event_id: object) -> str:
    return f"events:{event_id}:generation"


def event_generation(event_id: object) -> str:
    """Current generation token; a fresh one is minted if it was never set or got evicted."""
    return cache.get_or_set(event_generation_key(event_id), lambda: uuid4().hex, timeout=None)


def invalidate_event(event_id: object) -> None:
    cache.set(event_generation_key(event_id), uuid4().hex, timeout=None)
    cache.delete(event_cache_key(event_id))


def get_cached_event(event_id: object) -> dict | None:
    entry = cache.get(event_cache_key(event_id))
    if entry is None or entry["generation"] != event_generation(event_id):
        return None
    return entry["data"]


def cache_event(event_id: object, generation: str, data: dict) -> None:
    """Cache a roster read under ``generation``, taken before the read."""
    cache.set(event_cache_key(event_id), {"generation": generation, "data": data}, settings.EVENT_CACHE_TTL)
