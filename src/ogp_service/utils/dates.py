"""Timestamp parsing and normalization.

Upstream feeds carry RFC 822 dates, pages carry ISO 8601 or
``YYYY-MM-DD HH:MM:SS``, and image URLs carry bare ``YYYY-MM-DD``. Every
comparison happens on the normalized ``YYYY-MM-DD`` form.
"""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

_FALLBACK_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d",
    "%Y-%m-%d",
)


def parse_timestamp(value: str) -> datetime | None:
    """Parse an upstream timestamp in any of the supported formats.

    Args:
        value: RFC 822, ISO 8601 or one of the fallback formats

    Returns:
        The parsed datetime (aware when the input had an offset), or None
    """
    text = value.strip()
    if not text:
        return None

    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        pass

    try:
        return parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError):
        pass

    for fmt in _FALLBACK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def normalize_date(value: str) -> str | None:
    """Normalize a timestamp to ``YYYY-MM-DD``.

    Offset-aware timestamps are converted to UTC first, matching how the
    image URLs for feed items are generated. Naive timestamps keep their
    calendar date.

    Returns:
        The normalized date, or None if the value cannot be parsed
    """
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()
