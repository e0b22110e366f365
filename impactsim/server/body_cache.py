"""Bounded cache of generated body payloads, keyed by a hash of the generator inputs."""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from .config import settings

logger = logging.getLogger("impactsim.server")

Payload = dict[str, Any]


class BodyCache:
    """Thread-safe LRU of serialized bodies.

    Body endpoints are sync and run on the server's threadpool, so lookups and
    inserts are guarded by one lock. Generation itself happens outside the lock;
    two threads racing on the same cold key both build, and the first insert wins.
    """

    def __init__(self, max_size: int | None = None) -> None:
        self._entries: OrderedDict[str, Payload] = OrderedDict()
        self._max_size = max_size or settings.BODY_CACHE_MAX
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    @staticmethod
    def key_for(inputs: dict[str, Any]) -> str:
        canonical = json.dumps(inputs, sort_keys=True, separators=(",", ":"))
        return hashlib.sha256(canonical.encode()).hexdigest()[:16]

    def get_or_build(self, inputs: dict[str, Any], build: Callable[[], Payload]) -> Payload:
        """Return the cached payload for `inputs`, calling `build` on a miss."""
        key = self.key_for(inputs)
        with self._lock:
            payload = self._entries.get(key)
            if payload is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return payload
            self.misses += 1

        payload = build()

        with self._lock:
            existing = self._entries.get(key)
            if existing is not None:
                self._entries.move_to_end(key)
                return existing
            self._entries[key] = payload
            while len(self._entries) > self._max_size:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug(f"Evicted body {evicted} from cache")
        return payload

    def stats(self) -> dict[str, int]:
        with self._lock:
            return {"entries": len(self._entries), "hits": self.hits, "misses": self.misses}

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)


body_cache = BodyCache()
