"""
Catalog discovery configuration. Every knob is overridable from the environment
or a local .env file.
"""
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings

_BUNDLED_DATA = Path(__file__).parent / "mock_data"


class AdviceEndpoint:
    """The AI-advice proxy the product overlay talks to."""
    def __init__(self, base_url: str, path: str, timeout: float):
        self.base_url = base_url.rstrip("/")
        self.path = path
        self.timeout = timeout

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"


class Settings(BaseSettings):
    # Catalog sources
    data_dir: Path = _BUNDLED_DATA
    data_base_url: str = ""
    products_source: str = "products.json"
    articles_source: str = "blog.json"
    comments_source: str = "comments.json"
    article_identity_field: Literal["slug", "link"] = "slug"

    # Fetch policy
    fetch_retries: int = 3
    fetch_retry_delay_ms: int = 500
    fetch_timeout: float = 10.0
    cache_first: bool = False

    # Local persistence
    storage_path: Path = Path(".catalog_store.json")
    storage_quota_bytes: int = 5 * 1024 * 1024

    # View sizes
    featured_max_items: int = 12
    featured_page_size: int = 6
    featured_page_size_compact: int = 4
    comments_page_size: int = 5
    max_recent_searches: int = 5
    max_recently_viewed: int = 5
    trend_display_multiplier: float = 1.6
    related_products_limit: int = 4
    footer_tag_limit: int = 8
    recent_articles_limit: int = 4

    # AI advice proxy
    advice_base_url: str = "http://localhost:3000"
    advice_path: str = "/api/generate-advice"
    advice_timeout: float = 30.0
    mock_advice: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]
    debug_mode: bool = True

    class Config:
        env_file = ".env"

    def get_advice_endpoint(self) -> AdviceEndpoint:
        return AdviceEndpoint(self.advice_base_url, self.advice_path, self.advice_timeout)

    def featured_page_size_for(self, compact: bool) -> int:
        """Narrow viewports get the smaller grid."""
        return self.featured_page_size_compact if compact else self.featured_page_size


settings = Settings()
