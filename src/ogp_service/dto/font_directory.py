"""DTOs for the remote font-directory API."""

from pydantic import BaseModel, Field


class FontDirectoryItem(BaseModel):
    """One family entry in a directory listing."""

    family: str = Field(..., description="Family name")
    variants: list[str] = Field(default_factory=list, description="Variant tokens, e.g. 'regular', '700'")
    files: dict[str, str] = Field(default_factory=dict, description="Font file URL per variant token")

    model_config = {"extra": "ignore"}


class FontDirectoryResponse(BaseModel):
    """Directory listing filtered by family."""

    items: list[FontDirectoryItem] = Field(default_factory=list)

    model_config = {"extra": "ignore"}
