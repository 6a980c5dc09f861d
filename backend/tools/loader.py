"""
Catalog loading: fetch a JSON array, keep the records that match their shape,
retry transient failures and fall back to an empty list.

Sources are either absolute URLs, paths relative to `data_base_url` (when one is
configured) or files under the bundled data directory.
"""
import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from config import Settings, settings as default_settings
from errors import SourceFormatError
from models import Article, Comment, Product

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

_TRANSIENT_ERRORS = (httpx.HTTPError, OSError, ValueError, SourceFormatError)


class CatalogLoader:
    def __init__(
        self,
        config: Settings | None = None,
        client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.config = config or default_settings
        self.client = client
        self.sleep = sleep
        self._cache: dict[str, list] = {}

    # ---------------- Public API ----------------

    async def load_products(self) -> list[Product]:
        return await self.load(self.config.products_source, Product)

    async def load_articles(self) -> list[Article]:
        context = {"identity_field": self.config.article_identity_field}
        return await self.load(self.config.articles_source, Article, context)

    async def load_comments(self) -> list[Comment]:
        return await self.load(self.config.comments_source, Comment)

    async def load(self, source: str, model: type[T], context: dict | None = None) -> list[T]:
        """Never raises for I/O or format trouble; an exhausted source yields []."""
        target = self.resolve(source)
        retries = max(1, self.config.fetch_retries)
        logger.info(f"[loader] Fetching {target} (cache_first={self.config.cache_first})")

        for attempt in range(1, retries + 1):
            try:
                raw = await self._fetch_array(target)
            except _TRANSIENT_ERRORS as e:
                logger.warning(f"[loader] Attempt {attempt}/{retries} failed for {target}: {e}")
                if attempt < retries:
                    await self.sleep(self.config.fetch_retry_delay_ms * attempt / 1000)
                continue

            records = self._validate(raw, model, context)
            logger.info(f"[loader] Loaded {target}: fetched {len(raw)}, validated {len(records)}")
            return records

        logger.error(f"[loader] All {retries} attempts failed for {target}, using an empty collection")
        return []

    def resolve(self, source: str) -> str:
        if source.startswith(("http://", "https://")):
            return source
        if self.config.data_base_url:
            return f"{self.config.data_base_url.rstrip('/')}/{source.lstrip('/')}"
        return str(Path(self.config.data_dir) / source.lstrip("/"))

    # ---------------- Internals ----------------

    async def _fetch_array(self, target: str) -> list:
        if self.config.cache_first and target in self._cache:
            return self._cache[target]

        if target.startswith(("http://", "https://")):
            data = await self._fetch_remote(target)
        else:
            text = await asyncio.to_thread(Path(target).read_text, encoding="utf-8")
            data = json.loads(text)

        if not isinstance(data, list):
            raise SourceFormatError(f"{target} did not return a JSON array")
        self._cache[target] = data
        return data

    async def _fetch_remote(self, url: str) -> Any:
        headers = {} if self.config.cache_first else {"Cache-Control": "no-cache"}
        if self.client is not None:
            resp = await self.client.get(url, headers=headers)
            resp.raise_for_status()
            return resp.json()
        async with httpx.AsyncClient(timeout=self.config.fetch_timeout) as client:
            resp = await client.get(url, headers=headers)
            resp.raise_for_status()
            return resp.json()

    @staticmethod
    def _validate(raw: list, model: type[T], context: dict | None) -> list[T]:
        records = []
        for item in raw:
            try:
                records.append(model.model_validate(item, context=context))
            except ValidationError as e:
                logger.warning(f"[loader] Dropping invalid {model.__name__}: {e.errors()[0]['msg']} in {item!r:.120}")
        return records
