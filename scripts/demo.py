#!/usr/bin/env python3
"""
Demo script for the OGP image service.

Renders both card templates with local font files, then shows the image
cache gate serving a repeated request from Redis without re-rendering.

Usage:
    DEMO_FONT_REGULAR=Regular.ttf DEMO_FONT_BOLD=Bold.ttf python scripts/demo.py
"""

import asyncio
import os
import time
from pathlib import Path

from ogp_service import PostRecord, RedisAssetStore
from ogp_service.entities import FontAsset
from ogp_service.rendering.templates import BLOG_FONT_FAMILY, TOOLS_FONT_FAMILY, blog_card, tools_card
from ogp_service.services import IMAGE_NAMESPACE, AssetCache, RenderPipeline

OUT_DIR = Path(os.getenv("DEMO_OUT_DIR", "demo-out"))


def print_section(title: str) -> None:
    """Print a section header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70)


def load_fonts(family: str) -> list[FontAsset]:
    regular = Path(os.environ["DEMO_FONT_REGULAR"]).read_bytes()
    bold = Path(os.environ["DEMO_FONT_BOLD"]).read_bytes()
    return [FontAsset(family, 400, regular), FontAsset(family, 700, bold)]


async def demo_render(pipeline: RenderPipeline) -> bytes:
    """Render both templates to PNG files."""
    print_section("Rendering Templates")
    OUT_DIR.mkdir(parents=True, exist_ok=True)

    post = PostRecord(
        title="Caching rendered images at the edge",
        link="https://kq5.jp/blog/edge-cache",
        date="2024-01-05",
        slug="edge-cache",
    )
    cards = [
        ("blog.png", blog_card(post), load_fonts(BLOG_FONT_FAMILY)),
        (
            "tools.png",
            tools_card({"cat": "text", "slug": "counter", "title": "Character Counter"}),
            load_fonts(TOOLS_FONT_FAMILY),
        ),
    ]

    png = b""
    for name, tree, fonts in cards:
        start = time.perf_counter()
        png = await pipeline.render(tree, fonts)
        elapsed = (time.perf_counter() - start) * 1000
        (OUT_DIR / name).write_bytes(png)
        print(f"  ✓ {name}: {len(png):,} bytes in {elapsed:.0f}ms")
    return png


async def demo_image_cache(png: bytes) -> None:
    """Store a render in Redis and read it back."""
    print_section("Image Cache (Redis)")

    store = RedisAssetStore()
    try:
        if not await store.health_check():
            print("  ✗ Redis is not reachable, skipping")
            return

        images = AssetCache(store, IMAGE_NAMESPACE, ttl=60)
        key = "https://ogp.t3x.jp/tools/image.png?cat=text&slug=counter&title=demo"

        await images.put(key, png, "image/png")
        start = time.perf_counter()
        entry = await images.get(key)
        elapsed = (time.perf_counter() - start) * 1000

        if entry is not None:
            print(f"  ✓ HIT - {len(entry.payload):,} bytes in {elapsed:.1f}ms ({entry.cache_control})")
        else:
            print("  ✗ MISS")
    finally:
        await store.close()


async def run() -> None:
    pipeline = RenderPipeline.create()
    png = await demo_render(pipeline)
    await demo_image_cache(png)


def main() -> None:
    """Run all demos."""
    print("\n🚀 OGP Image Service Demo")
    print("=" * 70)

    try:
        asyncio.run(run())

        print("\n" + "=" * 70)
        print(f"✅ Demo completed, images written to {OUT_DIR}/")
        print("=" * 70)

    except KeyError as e:
        print(f"\n❌ Missing environment variable {e}")
        print("\nPoint DEMO_FONT_REGULAR and DEMO_FONT_BOLD at .ttf/.otf files.")
    except Exception as e:
        print(f"\n❌ Error: {e}")


if __name__ == "__main__":
    main()
