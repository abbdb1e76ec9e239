"""Data Transfer Objects for external contracts.

These Pydantic models define the JSON this service returns and the JSON
it reads from the font directory. Internal logic uses the dataclasses
from the entities package.
"""

from .font_directory import FontDirectoryItem, FontDirectoryResponse
from .responses import HealthCheckResponse

__all__ = [
    "FontDirectoryItem",
    "FontDirectoryResponse",
    "HealthCheckResponse",
]
