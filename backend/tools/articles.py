"""Blog article lookups and the footer's tag/article lists."""
from typing import Sequence

from models import Article, Product


def find_article(key: str, articles: Sequence[Article], identity_field: str = "slug") -> Article | None:
    for a in articles:
        if a.key(identity_field) == key:
            return a
    return None


def footer_tags(products: Sequence[Product], limit: int = 8) -> list[str]:
    """First `limit` distinct non-empty product types, in first-seen order."""
    return list(dict.fromkeys(p.type for p in products if p.type))[:limit]


def recent_articles(articles: Sequence[Article], limit: int = 4) -> list[Article]:
    return list(articles[:limit])
