"""Utility modules for the image service."""

from .dates import normalize_date, parse_timestamp

__all__ = ["normalize_date", "parse_timestamp"]
