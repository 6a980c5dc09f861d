"""
Catalog session: the in-memory collections plus local persistence for one
running page/process. Engines receive this object explicitly instead of
reaching for module globals.
"""
import asyncio
import logging
from dataclasses import dataclass, field

from config import Settings, settings as default_settings
from models import Article, Comment, Product
from tools.loader import CatalogLoader
from tools.storage import FileStorage, PersistentStore

logger = logging.getLogger(__name__)


@dataclass
class CatalogSession:
    store: PersistentStore
    products: list[Product] = field(default_factory=list)
    articles: list[Article] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    products_loaded: bool = False
    articles_loaded: bool = False
    comments_loaded: bool = False
    revision: int = 0
    _background: list[asyncio.Task] = field(default_factory=list, repr=False)

    @classmethod
    def from_settings(cls, config: Settings | None = None) -> "CatalogSession":
        config = config or default_settings
        backend = FileStorage(config.storage_path, quota_bytes=config.storage_quota_bytes)
        store = PersistentStore(
            backend,
            max_recent_searches=config.max_recent_searches,
            max_recently_viewed=config.max_recently_viewed,
        )
        return cls(store=store)

    def find_product(self, name: str) -> Product | None:
        for p in self.products:
            if p.name == name:
                return p
        return None

    def touch(self) -> None:
        """Mark derived views (featured, search, suggestions) as stale."""
        self.revision += 1

    # ---------------- Loading ----------------

    async def load_products(self, loader: CatalogLoader) -> list[Product]:
        """A saved admin override replaces the catalog outright; otherwise fetch it."""
        managed = self.store.managed_products()
        if managed:
            logger.info(f"Using {len(managed)} admin-managed products instead of the catalog source")
            self.products = managed
        else:
            self.products = await loader.load_products()
        self.products_loaded = True
        self.touch()
        return self.products

    async def load_articles(self, loader: CatalogLoader) -> list[Article]:
        self.articles = await loader.load_articles()
        self.articles_loaded = True
        self.touch()
        return self.articles

    async def load_comments(self, loader: CatalogLoader) -> list[Comment]:
        self.comments = await loader.load_comments()
        self.comments_loaded = True
        self.touch()
        return self.comments

    async def load(self, loader: CatalogLoader) -> None:
        """Products first; articles and comments keep loading in the background."""
        await self.load_products(loader)
        self._background = [
            asyncio.create_task(self.load_articles(loader)),
            asyncio.create_task(self.load_comments(loader)),
        ]

    async def wait_for_background(self) -> None:
        if self._background:
            await asyncio.gather(*self._background)
            self._background = []
