"""Content resolution protocol.

A content resolver turns validated request parameters into the content a
visual template renders. Returning None means the content does not exist
and the request ends in a 404.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ContentResolver(Protocol):
    """Protocol for per-source content lookup."""

    async def resolve(self, params: Mapping[str, str]) -> Any | None:
        """Resolve request parameters to renderable content.

        Args:
            params: Validated query parameters

        Returns:
            Content for the template, or None when not found
        """
        ...
