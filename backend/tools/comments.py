"""Which comments and sibling products to show in a product's detail overlay."""
import random
from typing import Sequence

from models import Comment, Product
from tools.ranking import Page, paginate


def name_keywords(product: Product) -> list[str]:
    return product.name.strip().lower().split()


def relevant_comments(
    product: Product,
    comments: Sequence[Comment],
    rng: random.Random | None = None,
) -> list[Comment]:
    """
    Comments on the same product type whose text mentions at least one word of
    the product name, in random order.

    Keywords match as substrings, not whole words, so a short keyword like
    "xe" also hits inside longer unrelated words.
    """
    product_type = (product.type or "").strip().lower()
    if not product_type:
        return []

    keywords = name_keywords(product)
    if not keywords or not keywords[0]:
        return []

    kept = []
    for comment in comments:
        if (comment.product_type or "").strip().lower() != product_type:
            continue
        text = (comment.text or "").lower()
        if any(kw in text for kw in keywords):
            kept.append(comment)

    # random.shuffle is an unbiased Fisher-Yates
    (rng or random).shuffle(kept)
    return kept


def paginate_comments(shuffled: Sequence[Comment], page: int, page_size: int = 5) -> Page[Comment]:
    return paginate(shuffled, page_size, page)


def related_products(product: Product, products: Sequence[Product], limit: int = 4) -> list[Product]:
    """Same type, different name, in collection order."""
    return [p for p in products if p.type == product.type and p.name != product.name][:limit]
