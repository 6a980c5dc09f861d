from .storage import PersistentStore, FileStorage, MemoryStorage
from .loader import CatalogLoader
from .ranking import Page, TrendSuggestion, paginate, compute_featured, trend_score, suggestion_order
from .search import SearchTier, SearchResult, search
from .comments import relevant_comments, paginate_comments, related_products

__all__ = [
    "PersistentStore",
    "FileStorage",
    "MemoryStorage",
    "CatalogLoader",
    "Page",
    "TrendSuggestion",
    "paginate",
    "compute_featured",
    "trend_score",
    "suggestion_order",
    "SearchTier",
    "SearchResult",
    "search",
    "relevant_comments",
    "paginate_comments",
    "related_products",
]
