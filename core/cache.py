# core/cache.py

"""
Page-level cache helpers.

Mutating services call invalidate_paths() with the logical page paths
whose cached payloads became stale (e.g. "/programs/<slug>").
"""

import hashlib
import logging

from django.core.cache import cache
from django.core.cache.backends.base import DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

KEY_PREFIX = "page"


def page_cache_key(path: str) -> str:
    digest = hashlib.md5(path.encode("utf-8")).hexdigest()
    return f"{KEY_PREFIX}:{digest}"


def invalidate_paths(*paths: str) -> None:
    keys = [page_cache_key(p) for p in paths if p]
    if keys:
        cache.delete_many(keys)
        logger.debug(f"Invalidated cached paths: {', '.join(paths)}")


def get_or_set_page(path: str, producer, timeout=DEFAULT_TIMEOUT):
    """
    Return the cached payload for path, computing it with producer() on miss.

    The default timeout is the cache backend's TIMEOUT; None never expires.
    """
    key = page_cache_key(path)
    payload = cache.get(key)
    if payload is None:
        payload = producer()
        cache.set(key, payload, timeout)
    return payload
