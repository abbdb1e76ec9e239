"""Namespace-scoped asset cache.

Binds an AssetStore to one logical namespace (fonts, metadata or
rendered images) and a default max-age, so callers deal only with keys
and payloads.
"""

import json
import logging
from typing import Any

from ogp_service.entities import CacheEntry
from ogp_service.protocols import AssetStore

logger = logging.getLogger(__name__)

FONT_NAMESPACE = "font-cache"
METADATA_NAMESPACE = "metadata-cache"
IMAGE_NAMESPACE = "ogp-cache"


class AssetCache:
    """Key to bytes cache with TTL semantics over one namespace.

    Example:
        ```python
        fonts = AssetCache(store, FONT_NAMESPACE, ttl=604800)
        await fonts.put(url, data, "font/woff")
        entry = await fonts.get(url)
        ```
    """

    def __init__(self, store: AssetStore, namespace: str, ttl: int) -> None:
        self._store = store
        self._namespace = namespace
        self._ttl = ttl

    @property
    def namespace(self) -> str:
        return self._namespace

    @property
    def ttl(self) -> int:
        return self._ttl

    async def get(self, key: str) -> CacheEntry | None:
        """Read an entry, or None on a miss."""
        entry = await self._store.get(self._namespace, key)
        logger.debug(
            "Cache %s", "hit" if entry else "miss", extra={"cache": self._namespace, "key": key}
        )
        return entry

    async def put(
        self,
        key: str,
        payload: bytes,
        content_type: str,
        ttl: int | None = None,
    ) -> CacheEntry:
        """Store a payload, superseding any previous entry under the key.

        Args:
            key: Key inside the namespace
            payload: Bytes to store
            content_type: MIME type of the payload
            ttl: Max-age override in seconds. Defaults to the cache's ttl.

        Returns:
            The stored entry
        """
        entry = CacheEntry(key=key, payload=payload, content_type=content_type, ttl=ttl or self._ttl)
        await self._store.put(self._namespace, entry)
        return entry

    async def get_json(self, key: str) -> Any | None:
        """Read and decode a JSON entry; undecodable entries count as misses."""
        entry = await self.get(key)
        if entry is None:
            return None
        try:
            return json.loads(entry.payload)
        except ValueError:
            logger.warning("Discarding undecodable cache entry", extra={"cache": self._namespace, "key": key})
            return None

    async def put_json(self, key: str, value: Any) -> CacheEntry:
        payload = json.dumps(value, ensure_ascii=False).encode()
        return await self.put(key, payload, "application/json")
