"""Cache entry domain entity."""

import time
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CacheEntry:
    """A payload stored in one cache namespace.

    Attributes:
        key: The key inside the namespace (e.g. a URL)
        payload: The stored bytes
        content_type: MIME type of the payload
        stored_at: Unix timestamp of the write
        ttl: Max-age in seconds supplied at write time
    """

    key: str
    payload: bytes
    content_type: str
    ttl: int
    stored_at: float = field(default_factory=time.time)

    @property
    def expires_at(self) -> float:
        """Unix timestamp after which the store may drop the entry."""
        return self.stored_at + self.ttl

    def is_expired(self, now: float | None = None) -> bool:
        """Check whether the entry outlived its max-age."""
        return (now if now is not None else time.time()) >= self.expires_at

    @property
    def cache_control(self) -> str:
        """Cache-Control value matching this entry's max-age."""
        return f"max-age={self.ttl}"
