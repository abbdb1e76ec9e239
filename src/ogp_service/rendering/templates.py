"""Visual templates for the two content sources.

Each template takes resolved content and returns a render tree for a
1200x630 card.
"""

from collections.abc import Mapping

from ogp_service.entities import PostRecord

from .tree import Box, box, text

BLOG_FONT_FAMILY = "M PLUS Rounded 1c"
TOOLS_FONT_FAMILY = "inconsolata"


def blog_card(post: PostRecord, site: str = "kq5.jp") -> Box:
    """Card showing the post slug, title, date and site name."""
    panel = box(
        text(f"/{post.slug}", font_size=36, color="#aaaaaa"),
        text(post.title, font_size=70, font_weight="bold", flex=1, line_clamp=3),
        box(
            text(post.date),
            text(site),
            direction="row",
            justify="space-between",
            font_size=45,
            font_weight="bold",
            color="#cccccc",
        ),
        inset=(60, 60, 60, 60),
        border_radius=30,
        background="rgba(33,36,56,.8)",
        padding=40,
        gap=20,
    )
    return box(
        panel,
        background="linear-gradient(to bottom right, #13161b, #131217)",
        color="#eeeeee",
        font_family=f'"{BLOG_FONT_FAMILY}", sans-serif',
    )


def tools_card(content: Mapping[str, str], site: str = "tools.t3x.jp") -> Box:
    """Card showing the tool's ``cat.slug`` identifier and its title."""
    panel = box(
        text(f"/*** {site} ***/", font_size=48, color="#bbbbbb"),
        text(f"{content['cat']}.{content['slug']}", font_size=90, font_weight="bold"),
        text(content["title"], font_size=60, font_weight="bold", color="#dddddd", line_clamp=2),
        inset=(50, 50, 50, 50),
        border_radius=50,
        background="#5a596b45",
        justify="center",
        gap=80,
    )
    return box(
        panel,
        background="linear-gradient(0deg, #0f0c38, #030221)",
        color="#eeeeee",
        font_family=f"{TOOLS_FONT_FAMILY}, sans-serif",
        text_align="center",
    )
