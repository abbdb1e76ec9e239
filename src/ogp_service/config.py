import os
from dataclasses import dataclass
from functools import lru_cache

import redis.asyncio as redis
from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Cache
    cache_key_prefix: str = os.getenv("CACHE_KEY_PREFIX", "ogp")
    font_cache_ttl: int = int(os.getenv("FONT_CACHE_TTL", "604800"))  # 7 days
    metadata_cache_ttl: int = int(os.getenv("METADATA_CACHE_TTL", "3600"))
    image_cache_ttl: int = int(os.getenv("IMAGE_CACHE_TTL", "31536000"))  # 1 year

    # Font directory (Google Fonts developer API)
    google_fonts_api_key: str | None = os.getenv("GOOGLE_FONTS_API_KEY")
    google_fonts_api_url: str = os.getenv(
        "GOOGLE_FONTS_API_URL", "https://www.googleapis.com/webfonts/v1/webfonts"
    )

    # Blog source
    blog_feed_url: str = os.getenv("BLOG_FEED_URL", "https://kq5.jp/rss.xml")
    blog_page_url_template: str = os.getenv("BLOG_PAGE_URL_TEMPLATE", "https://kq5.jp/blog/{slug}")
    blog_image_url: str = os.getenv("BLOG_IMAGE_URL", "https://ogp.kq5.jp/blog/image.png")

    # Tools source
    tools_font_url_template: str = os.getenv(
        "TOOLS_FONT_URL_TEMPLATE", "https://tools.t3x.jp/fonts/{name}.woff"
    )
    tools_image_url: str = os.getenv("TOOLS_IMAGE_URL", "https://ogp.t3x.jp/tools/image.png")

    # Upstream HTTP
    http_timeout: float = float(os.getenv("HTTP_TIMEOUT", "10.0"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "false").lower() == "true"

    @property
    def has_font_directory_key(self) -> bool:
        """Check whether the font-directory credential is configured."""
        return bool(self.google_fonts_api_key)

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        for name in ("font_cache_ttl", "metadata_cache_ttl", "image_cache_ttl"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name.upper()} must be a positive number of seconds")

        if "{slug}" not in self.blog_page_url_template:
            raise ValueError("BLOG_PAGE_URL_TEMPLATE must contain a {slug} placeholder")

        if "{name}" not in self.tools_font_url_template:
            raise ValueError("TOOLS_FONT_URL_TEMPLATE must contain a {name} placeholder")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


def get_redis_client(settings: Settings | None = None) -> redis.Redis:
    """Create an asyncio Redis client instance."""
    settings = settings or get_settings()
    return redis.from_url(
        settings.redis_url,
        password=settings.redis_password,
        decode_responses=False,
    )
