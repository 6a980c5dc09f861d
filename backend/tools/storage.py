"""
Local persistence: recent searches, recently viewed products, click counts and
the admin-managed product override.

PersistentStore is a typed JSON layer over a plain string key/value backend.
A value that no longer parses (or no longer has the expected shape) is treated
as absent and erased; a write that the backend refuses is reported, never
raised.
"""
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable

from pydantic import NonNegativeInt, TypeAdapter, ValidationError

from errors import StorageError, StorageQuotaError
from models import Product

logger = logging.getLogger(__name__)

RECENT_SEARCHES_KEY = "recent_searches"
RECENTLY_VIEWED_KEY = "recently_viewed"
PRODUCT_CLICKS_KEY = "product_clicks"
MANAGED_PRODUCTS_KEY = "managed_products"

RecentSearches = TypeAdapter(list[str])
RecentlyViewed = TypeAdapter(list[Product])
ClickCounts = TypeAdapter(dict[str, NonNegativeInt])
ManagedProducts = TypeAdapter(list[Product])


def _payload_size(data: dict[str, str]) -> int:
    return sum(len(k.encode("utf-8")) + len(v.encode("utf-8")) for k, v in data.items())


# ──────────────────────── Backends ────────────────────────

class MemoryStorage:
    """String key/value store held in memory."""

    def __init__(self, quota_bytes: int | None = None, initial: dict[str, str] | None = None):
        self.quota_bytes = quota_bytes
        self._data: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        candidate = {**self._data, key: value}
        if self.quota_bytes is not None and _payload_size(candidate) > self.quota_bytes:
            raise StorageQuotaError(f"Writing '{key}' would exceed {self.quota_bytes} bytes")
        self._write(candidate)
        self._data = candidate

    def remove_item(self, key: str) -> None:
        if key not in self._data:
            return
        candidate = {k: v for k, v in self._data.items() if k != key}
        try:
            self._write(candidate)
        except StorageError as e:
            logger.warning(f"Could not erase '{key}': {e}")
            return
        self._data = candidate

    def _write(self, data: dict[str, str]) -> None:
        pass

    def keys(self) -> list[str]:
        return list(self._data)


class FileStorage(MemoryStorage):
    """
    Durable store: one JSON file mapping key -> raw string.
    Each write replaces the file atomically, so a failed write leaves the
    previous contents on disk and in memory.
    """

    def __init__(self, path: Path | str, quota_bytes: int | None = None):
        self.path = Path(path)
        super().__init__(quota_bytes=quota_bytes, initial=self._read_file())

    def _read_file(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Storage file {self.path} unreadable, starting empty: {e}")
            return {}
        if not isinstance(raw, dict):
            logger.warning(f"Storage file {self.path} is not a JSON object, starting empty")
            return {}
        return {k: v for k, v in raw.items() if isinstance(v, str)}

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        except OSError as e:
            raise StorageError(f"Could not write {self.path}: {e}") from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp, self.path)
        except OSError as e:
            Path(tmp).unlink(missing_ok=True)
            raise StorageError(f"Could not write {self.path}: {e}") from e


# ──────────────────────── Typed store ────────────────────────

class PersistentStore:
    def __init__(self, backend: MemoryStorage, max_recent_searches: int = 5, max_recently_viewed: int = 5):
        self.backend = backend
        self.max_recent_searches = max_recent_searches
        self.max_recently_viewed = max_recently_viewed
        self.last_warning: str | None = None
        self._lock = threading.RLock()

    def get(self, key: str, shape: TypeAdapter, default: Any = None) -> Any:
        """Read and validate `key`; anything unreadable is erased and reported as absent."""
        with self._lock:
            raw = self.backend.get_item(key)
            if raw is None:
                return default
            try:
                return shape.validate_json(raw)
            except ValidationError as e:
                logger.warning(f"Corrupted value under '{key}', clearing it: {e.error_count()} error(s)")
                self.backend.remove_item(key)
                return default

    def set(self, key: str, value: Any, shape: TypeAdapter) -> bool:
        """Serialize and write `value`. Returns False (with a warning) if the backend refused."""
        with self._lock:
            raw = shape.dump_json(value).decode("utf-8")
            try:
                self.backend.set_item(key, raw)
            except StorageError as e:
                self.last_warning = f"Could not save '{key}': local storage may be full."
                logger.warning(f"{self.last_warning} ({e})")
                return False
            return True

    def update(self, key: str, shape: TypeAdapter, default: Any, mutate: Callable[[Any], Any]) -> bool:
        """Atomic read-modify-write of a single key."""
        with self._lock:
            current = self.get(key, shape, default)
            return self.set(key, mutate(current), shape)

    # ---------------- Recent searches ----------------

    def recent_searches(self) -> list[str]:
        return self.get(RECENT_SEARCHES_KEY, RecentSearches, [])

    def add_recent_search(self, query: str) -> bool:
        if not query:
            return True

        def push(searches: list[str]) -> list[str]:
            kept = [s for s in searches if s.lower() != query.lower()]
            return [query, *kept][: self.max_recent_searches]

        return self.update(RECENT_SEARCHES_KEY, RecentSearches, [], push)

    # ---------------- Recently viewed ----------------

    def recently_viewed(self) -> list[Product]:
        return self.get(RECENTLY_VIEWED_KEY, RecentlyViewed, [])

    def add_recently_viewed(self, product: Product) -> bool:
        if not product.name:
            return True

        def push(viewed: list[Product]) -> list[Product]:
            kept = [p for p in viewed if p.name != product.name]
            return [product, *kept][: self.max_recently_viewed]

        return self.update(RECENTLY_VIEWED_KEY, RecentlyViewed, [], push)

    # ---------------- Click counts ----------------

    def click_counts(self) -> dict[str, int]:
        return self.get(PRODUCT_CLICKS_KEY, ClickCounts, {})

    def click_count(self, product_name: str) -> int:
        return self.click_counts().get(product_name, 0)

    def increment_click(self, product_name: str) -> bool:
        def bump(clicks: dict[str, int]) -> dict[str, int]:
            clicks[product_name] = clicks.get(product_name, 0) + 1
            return clicks

        return self.update(PRODUCT_CLICKS_KEY, ClickCounts, {}, bump)

    # ---------------- Managed override ----------------

    def managed_products(self) -> list[Product] | None:
        products = self.get(MANAGED_PRODUCTS_KEY, ManagedProducts, None)
        return products or None

    def save_managed_products(self, products: list[Product]) -> bool:
        return self.set(MANAGED_PRODUCTS_KEY, products, ManagedProducts)
