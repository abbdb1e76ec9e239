"""XPath-based page extractor.

Reads a post page with lxml using a configurable set of XPath
expressions. The defaults target a page with one ``h1`` heading, a
``time`` element and ``rel="tag"`` links; swap the expressions (or the
whole extractor) when the upstream markup changes.
"""

import logging
from dataclasses import dataclass

from lxml import etree, html as lxml_html

from ogp_service.entities import PostRecord
from ogp_service.utils import normalize_date

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class XPathPageExtractor:
    """PageExtractor driven by XPath expressions.

    Attributes:
        title_xpath: Text nodes of the post heading
        date_xpath: Timestamp attribute or text
        tags_xpath: Text nodes of the tag links
    """

    title_xpath: str = "(//article//h1 | //h1)[1]//text()"
    date_xpath: str = "(//time/@datetime | //time/text())[1]"
    tags_xpath: str = "//a[@rel='tag']//text()"

    def extract(self, html: str, slug: str, url: str) -> PostRecord | None:
        """Extract a post record from page markup.

        Pages reached this way are not listed in the feed, so the record
        is always marked hidden.

        Returns:
            The record, or None when the heading or timestamp is missing
        """
        try:
            doc = lxml_html.fromstring(html)
            title = " ".join(t.strip() for t in doc.xpath(self.title_xpath) if t.strip())
            raw_dates = doc.xpath(self.date_xpath)
            tags = tuple(t.strip() for t in doc.xpath(self.tags_xpath) if t.strip())
        except (etree.ParserError, etree.XPathError, ValueError) as e:
            logger.info("Unreadable page structure: %s", e, extra={"url": url})
            return None

        date = normalize_date(str(raw_dates[0])) if raw_dates else None
        if not title or date is None:
            logger.info("Page missing heading or timestamp", extra={"url": url})
            return None

        return PostRecord(title=title, link=url, date=date, slug=slug, hidden=True, tags=tags)
