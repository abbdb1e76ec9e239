"""Remote font-directory client.

Queries the Google Fonts developer API, which lists the font files of a
family keyed by variant token ("regular", "700", "700italic", ...).
"""

from pydantic import ValidationError

from ogp_service.dto import FontDirectoryResponse
from ogp_service.errors import UpstreamFetchError

from .http_fetcher import HttpFetcher


class FontDirectoryClient:
    """Looks up font file URLs by family name."""

    def __init__(self, fetcher: HttpFetcher, api_url: str) -> None:
        self._fetcher = fetcher
        self._api_url = api_url

    async def list_files(self, family: str, api_key: str) -> dict[str, str]:
        """List the variant files of a family.

        Args:
            family: Family name, e.g. "M PLUS Rounded 1c"
            api_key: API credential

        Returns:
            Mapping of variant token to font file URL

        Raises:
            UpstreamFetchError: If the request fails or the family is unknown
        """
        data = await self._fetcher.get_json(self._api_url, params={"key": api_key, "family": family})
        try:
            listing = FontDirectoryResponse.model_validate(data)
        except ValidationError as e:
            raise UpstreamFetchError(f"Unexpected font directory response for {family!r}") from e

        if not listing.items:
            raise UpstreamFetchError(f"Font directory has no family {family!r}")

        item = next(
            (i for i in listing.items if i.family.casefold() == family.casefold()),
            listing.items[0],
        )
        if not item.files:
            raise UpstreamFetchError(f"Font directory entry for {family!r} lists no files")
        return dict(item.files)
