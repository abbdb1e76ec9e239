"""RSS feed client.

Fetches the upstream syndication feed and parses its items into
PostRecords. Besides the standard RSS fields the feed exposes ``slug``,
``hidden`` and comma-joined ``tags`` elements on every item.
"""

import logging
from xml.etree.ElementTree import Element, ParseError

import defusedxml.ElementTree as ET
from defusedxml import DefusedXmlException

from ogp_service.entities import PostRecord
from ogp_service.errors import UpstreamFetchError
from ogp_service.utils import normalize_date

from .http_fetcher import HttpFetcher

logger = logging.getLogger(__name__)


class FeedClient:
    """Reads the full post index from an RSS feed."""

    def __init__(self, fetcher: HttpFetcher) -> None:
        self._fetcher = fetcher

    async def fetch(self, url: str) -> list[PostRecord]:
        """Fetch and parse a feed.

        Args:
            url: Feed URL

        Returns:
            Records in feed order

        Raises:
            UpstreamFetchError: If the feed cannot be fetched or parsed
        """
        xml = await self._fetcher.get_text(url)
        return parse_feed(xml or "", source=url)


def parse_feed(xml: str, source: str = "<feed>") -> list[PostRecord]:
    """Parse RSS 2.0 markup into PostRecords.

    Items without a slug or with an unparsable publish date are skipped.

    Raises:
        UpstreamFetchError: If the markup is not a well-formed RSS document
    """
    try:
        root = ET.fromstring(xml)
    except (ParseError, DefusedXmlException) as e:
        raise UpstreamFetchError(f"Malformed feed from {source}: {e}") from e

    channel = root.find("channel")
    if root.tag != "rss" or channel is None:
        raise UpstreamFetchError(f"Feed from {source} has no rss/channel element")

    records = []
    for item in channel.findall("item"):
        record = _parse_item(item)
        if record is not None:
            records.append(record)

    logger.debug("Parsed %d feed items", len(records), extra={"url": source})
    return records


def _parse_item(item: Element) -> PostRecord | None:
    fields = {_local_name(child.tag): (child.text or "").strip() for child in item}

    slug = fields.get("slug", "")
    if not slug:
        return None

    date = normalize_date(fields.get("pubDate", ""))
    if date is None:
        logger.warning("Skipping feed item %r with unparsable pubDate %r", slug, fields.get("pubDate"))
        return None

    return PostRecord(
        title=fields.get("title", ""),
        link=fields.get("link", ""),
        date=date,
        slug=slug,
        hidden=fields.get("hidden", "").lower() == "true",
        tags=tuple(tag.strip() for tag in fields.get("tags", "").split(",") if tag.strip()),
    )


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]
