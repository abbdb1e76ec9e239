"""Post record domain entity."""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class PostRecord:
    """A normalized upstream content item.

    Identity is the (slug, date) pair image requests are looked up by.

    Attributes:
        title: Post title
        link: Canonical URL of the post
        date: Publish date normalized to ``YYYY-MM-DD``
        slug: URL slug
        hidden: Whether the post is unlisted
        tags: Ordered tag names
    """

    title: str
    link: str
    date: str
    slug: str
    hidden: bool = False
    tags: tuple[str, ...] = field(default_factory=tuple)

    def matches(self, slug: str, date: str) -> bool:
        """Check identity against an already-normalized (slug, date) pair."""
        return self.slug == slug and self.date == date

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["tags"] = list(self.tags)
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PostRecord":
        return cls(
            title=str(data["title"]),
            link=str(data["link"]),
            date=str(data["date"]),
            slug=str(data["slug"]),
            hidden=bool(data.get("hidden", False)),
            tags=tuple(data.get("tags") or ()),
        )
