"""Asset storage protocol.

Defines the interface for the durable key/value store behind every cache
tier. Keys are scoped by a logical namespace (fonts, metadata, images)
and each write carries its own max-age.

Implementations can include:
- Redis (default)
- An in-memory dictionary (tests)
- Any store with per-key expiry
"""

from typing import Protocol, runtime_checkable

from ogp_service.entities import CacheEntry


@runtime_checkable
class AssetStore(Protocol):
    """Protocol for namespaced cache storage backends."""

    async def get(self, namespace: str, key: str) -> CacheEntry | None:
        """Read an entry.

        Args:
            namespace: Logical namespace (e.g. "font-cache")
            key: Key inside the namespace

        Returns:
            The stored entry, or None when absent or expired
        """
        ...

    async def put(self, namespace: str, entry: CacheEntry) -> None:
        """Write an entry, superseding any previous value under its key.

        Args:
            namespace: Logical namespace
            entry: The entry to store; its ttl drives expiry
        """
        ...

    async def health_check(self) -> bool:
        """Check if the store is reachable."""
        ...
