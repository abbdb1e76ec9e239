"""Content resolvers for the two content sources.

Both satisfy the ContentResolver protocol structurally.
"""

from collections.abc import Mapping

from ogp_service.entities import PostRecord

from .metadata_resolver import MetadataResolver


class BlogPostResolver:
    """Resolves blog image requests to feed/page PostRecords."""

    def __init__(self, metadata: MetadataResolver) -> None:
        self._metadata = metadata

    async def resolve(self, params: Mapping[str, str]) -> PostRecord | None:
        return await self._metadata.resolve_record(params["slug"], params["date"])


class QueryParamsResolver:
    """Uses the request parameters themselves as the content.

    The tools catalog carries everything its card shows in the query
    string, so there is nothing upstream to look up.
    """

    async def resolve(self, params: Mapping[str, str]) -> dict[str, str]:
        return dict(params)
