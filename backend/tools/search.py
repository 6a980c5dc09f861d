"""
On-page catalog search.

Three tiers, first non-empty one wins:
  EXACT_TYPE      the query names a product type exactly (case/space-insensitive)
  NAME_SUBSTRING  the query appears inside a product name
  NONE            nothing matched
A blank query is not a search at all; callers show the featured grid instead.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from models import Product
from tools.storage import PersistentStore

logger = logging.getLogger(__name__)


class SearchTier(str, Enum):
    EXACT_TYPE = "EXACT_TYPE"
    NAME_SUBSTRING = "NAME_SUBSTRING"
    NONE = "NONE"


@dataclass(slots=True)
class SearchResult:
    query: str
    tier: SearchTier
    results: list[Product]
    saved: bool = True  # False when the query could not be recorded in recent searches


def match_products(query: str, products: Sequence[Product]) -> SearchResult:
    """Pure tiered match; `query` must already be trimmed and non-empty."""
    q = query.lower()

    by_type = [p for p in products if (p.type or "").lower().strip() == q]
    if by_type:
        return SearchResult(query=query, tier=SearchTier.EXACT_TYPE, results=by_type)

    by_name = [p for p in products if q in p.name.lower()]
    if by_name:
        return SearchResult(query=query, tier=SearchTier.NAME_SUBSTRING, results=by_name)

    return SearchResult(query=query, tier=SearchTier.NONE, results=[])


def search(query: str, products: Sequence[Product], store: PersistentStore | None = None) -> SearchResult | None:
    """Run a search and remember the query. Returns None when there is no active query."""
    trimmed = (query or "").strip()
    if not trimmed:
        return None

    saved = store.add_recent_search(trimmed) if store is not None else True

    result = match_products(trimmed, products)
    result.saved = saved
    logger.info(f"Search '{trimmed}' -> {result.tier.value} ({len(result.results)} results)")
    return result
