"""Popularity ranking for the featured grid and the trending suggestion chips."""
import math
from dataclasses import dataclass
from typing import Generic, Mapping, Sequence, TypeVar

from models import Product

T = TypeVar("T")


@dataclass(slots=True)
class Page(Generic[T]):
    items: list[T]
    current_page: int
    total_pages: int
    total_items: int = 0


@dataclass(slots=True)
class TrendSuggestion:
    type: str
    score: int
    display_score: int = 0


def paginate(items: Sequence[T], page_size: int, page: int) -> Page[T]:
    """Slice one page out of `items`, clamping the requested page into range."""
    if page_size < 1:
        raise ValueError("page_size must be positive")
    total_pages = math.ceil(len(items) / page_size)
    current = max(1, min(page, total_pages)) if total_pages else 1
    start = (current - 1) * page_size
    return Page(
        items=list(items[start:start + page_size]),
        current_page=current,
        total_pages=total_pages,
        total_items=len(items),
    )


def compute_featured(products: Sequence[Product], clicks: Mapping[str, int], max_items: int = 12) -> list[Product]:
    """Most-clicked first; equal counts keep collection order (sorted() is stable)."""
    ranked = sorted(products, key=lambda p: clicks.get(p.name, 0), reverse=True)
    return ranked[:max_items]


def trend_score(product_type: str, products: Sequence[Product], clicks: Mapping[str, int]) -> int:
    return sum(clicks.get(p.name, 0) for p in products if p.type == product_type)


def suggestion_order(
    products: Sequence[Product],
    clicks: Mapping[str, int],
    display_multiplier: float = 1.6,
) -> list[TrendSuggestion]:
    """Distinct non-empty types, hottest first; ties keep first-seen order."""
    types = list(dict.fromkeys(p.type for p in products if p.type and p.type.strip()))
    suggestions = []
    for t in types:
        score = trend_score(t, products, clicks)
        suggestions.append(TrendSuggestion(type=t, score=score, display_score=math.floor(score * display_multiplier + 0.5)))
    suggestions.sort(key=lambda s: s.score, reverse=True)
    return suggestions
