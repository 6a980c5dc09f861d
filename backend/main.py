"""
FastAPI front for the catalog discovery engine.

Startup loads products first (admin override or catalog source), then lets
articles and comments finish in the background. Every view is recomputed from
the session on each request, so admin edits show up immediately.
"""
import random
import logging
from typing import Optional
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from config import settings
from errors import DuplicateProductError
from models import Article, Comment, ExpertAdvice, Product
from session import CatalogSession
from agents.product_advisor import ProductAdvisorAgent
from tools.admin import CatalogAdmin
from tools.articles import find_article, footer_tags, recent_articles
from tools.comments import paginate_comments, related_products, relevant_comments
from tools.loader import CatalogLoader
from tools.ranking import compute_featured, paginate, suggestion_order
from tools.search import search

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

product_advisor = ProductAdvisorAgent()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("=" * 60)
    logger.info("Catalog Discovery Service")
    logger.info(f"Data: {settings.data_base_url or settings.data_dir} (cache_first={settings.cache_first})")
    logger.info(f"Advice proxy: {settings.get_advice_endpoint().url} (mock={settings.mock_advice})")
    logger.info("=" * 60)
    session = CatalogSession.from_settings(settings)
    await session.load(CatalogLoader(settings))
    app.state.session = session
    yield
    await session.wait_for_background()


app = FastAPI(
    title="Catalog Discovery Service",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_session(request: Request) -> CatalogSession:
    return request.app.state.session


# ──────────────────────── Response models ────────────────────────

class RankedProduct(BaseModel):
    product: Product
    clicks: int


class ProductPage(BaseModel):
    items: list[RankedProduct]
    current_page: int
    total_pages: int
    total_items: int


class SearchResponse(BaseModel):
    query: str
    tier: Optional[str] = None  # None = no active query, `featured` is filled instead
    results: list[RankedProduct] = []
    featured: Optional[ProductPage] = None
    warning: Optional[str] = None


class SuggestionOut(BaseModel):
    type: str
    score: int
    display_score: int


class CommentPage(BaseModel):
    items: list[Comment]
    current_page: int
    total_pages: int
    total_items: int
    seed: int
    comments_loaded: bool


class ProductDetail(BaseModel):
    product: Product
    clicks: int
    related: list[Product]
    comments: CommentPage
    warning: Optional[str] = None


class AdviceResponse(BaseModel):
    available: bool
    advice: Optional[ExpertAdvice] = None
    message: Optional[str] = None
    latency_ms: int


class FooterResponse(BaseModel):
    tags: list[str]
    articles: list[Article]


class UpsertRequest(BaseModel):
    product: Product
    original_name: Optional[str] = None


class AdminResponse(BaseModel):
    products: list[Product]
    revision: int
    warning: Optional[str] = None


# ──────────────────────── Helpers ────────────────────────

def _ranked(products: list[Product], clicks: dict[str, int]) -> list[RankedProduct]:
    return [RankedProduct(product=p, clicks=clicks.get(p.name, 0)) for p in products]


def _featured_page(session: CatalogSession, page: int, compact: bool) -> ProductPage:
    clicks = session.store.click_counts()
    featured = compute_featured(session.products, clicks, settings.featured_max_items)
    sliced = paginate(featured, settings.featured_page_size_for(compact), page)
    return ProductPage(
        items=_ranked(sliced.items, clicks),
        current_page=sliced.current_page,
        total_pages=sliced.total_pages,
        total_items=sliced.total_items,
    )


def _comment_page(session: CatalogSession, product: Product, page: int, seed: Optional[int]) -> CommentPage:
    # Same seed -> same shuffle, so later pages line up with the first one.
    seed = seed if seed is not None else random.randrange(2**31)
    shuffled = relevant_comments(product, session.comments, rng=random.Random(seed))
    sliced = paginate_comments(shuffled, page, settings.comments_page_size)
    return CommentPage(
        items=sliced.items,
        current_page=sliced.current_page,
        total_pages=sliced.total_pages,
        total_items=sliced.total_items,
        seed=seed,
        comments_loaded=session.comments_loaded,
    )


def _require_product(session: CatalogSession, name: str) -> Product:
    product = session.find_product(name)
    if product is None:
        raise HTTPException(status_code=404, detail=f"Product {name} not found")
    return product


def _warning(ok: bool, session: CatalogSession) -> Optional[str]:
    return None if ok else session.store.last_warning


# ──────────────────────── Catalog Endpoints ────────────────────────

@app.get("/products/featured", response_model=ProductPage)
async def featured_products(page: int = 1, compact: bool = False, session: CatalogSession = Depends(get_session)):
    return _featured_page(session, page, compact)


@app.get("/search", response_model=SearchResponse)
async def search_products(q: str = "", page: int = 1, compact: bool = False,
                          session: CatalogSession = Depends(get_session)):
    result = search(q, session.products, session.store)
    if result is None:
        return SearchResponse(query="", featured=_featured_page(session, page, compact))
    clicks = session.store.click_counts()
    return SearchResponse(
        query=result.query,
        tier=result.tier.value,
        results=_ranked(result.results, clicks),
        warning=_warning(result.saved, session),
    )


@app.get("/suggestions", response_model=list[SuggestionOut])
async def suggestions(session: CatalogSession = Depends(get_session)):
    clicks = session.store.click_counts()
    return [
        SuggestionOut(type=s.type, score=s.score, display_score=s.display_score)
        for s in suggestion_order(session.products, clicks, settings.trend_display_multiplier)
    ]


@app.get("/recent-searches", response_model=list[str])
async def recent_searches(session: CatalogSession = Depends(get_session)):
    return session.store.recent_searches()


@app.get("/recently-viewed", response_model=list[Product])
async def recently_viewed(session: CatalogSession = Depends(get_session)):
    return session.store.recently_viewed()


# ──────────────────────── Product Overlay ────────────────────────
# Product names are free text (slashes included), so they travel as `?name=`.

@app.post("/products/view", response_model=ProductDetail)
async def view_product(name: str, seed: Optional[int] = None, session: CatalogSession = Depends(get_session)):
    """Opening the overlay counts as a click and lands in recently viewed."""
    product = _require_product(session, name)
    ok = session.store.increment_click(product.name)
    ok = session.store.add_recently_viewed(product) and ok
    return ProductDetail(
        product=product,
        clicks=session.store.click_count(product.name),
        related=related_products(product, session.products, settings.related_products_limit),
        comments=_comment_page(session, product, 1, seed),
        warning=_warning(ok, session),
    )


@app.get("/products/comments", response_model=CommentPage)
async def product_comments(name: str, page: int = 1, seed: Optional[int] = None,
                           session: CatalogSession = Depends(get_session)):
    product = _require_product(session, name)
    return _comment_page(session, product, page, seed)


@app.get("/products/related", response_model=list[Product])
async def product_related(name: str, session: CatalogSession = Depends(get_session)):
    product = _require_product(session, name)
    return related_products(product, session.products, settings.related_products_limit)


@app.post("/products/advice", response_model=AdviceResponse)
async def product_advice(name: str, session: CatalogSession = Depends(get_session)):
    product = _require_product(session, name)
    return AdviceResponse(**await product_advisor.advise(product))


# ──────────────────────── Articles & Footer ────────────────────────

@app.get("/articles", response_model=list[Article])
async def list_articles(session: CatalogSession = Depends(get_session)):
    return session.articles


@app.get("/articles/{key:path}", response_model=Article)
async def get_article(key: str, session: CatalogSession = Depends(get_session)):
    article = find_article(key, session.articles, settings.article_identity_field)
    if article is None:
        raise HTTPException(status_code=404, detail=f"Article {key} not found")
    return article


@app.get("/footer", response_model=FooterResponse)
async def footer(session: CatalogSession = Depends(get_session)):
    return FooterResponse(
        tags=footer_tags(session.products, settings.footer_tag_limit),
        articles=recent_articles(session.articles, settings.recent_articles_limit),
    )


# ──────────────────────── Admin ────────────────────────

@app.get("/admin/products", response_model=AdminResponse)
async def admin_list(session: CatalogSession = Depends(get_session)):
    return AdminResponse(products=CatalogAdmin(session).list_products(), revision=session.revision)


@app.post("/admin/products", response_model=AdminResponse)
async def admin_upsert(req: UpsertRequest, session: CatalogSession = Depends(get_session)):
    try:
        ok = CatalogAdmin(session).upsert(req.product, req.original_name)
    except DuplicateProductError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return AdminResponse(products=session.products, revision=session.revision, warning=_warning(ok, session))


@app.delete("/admin/products", response_model=AdminResponse)
async def admin_delete(name: str, session: CatalogSession = Depends(get_session)):
    ok = CatalogAdmin(session).remove(name)
    return AdminResponse(products=session.products, revision=session.revision, warning=_warning(ok, session))


# ──────────────────────── Utility Endpoints ────────────────────────

@app.get("/health")
async def health(session: CatalogSession = Depends(get_session)):
    return {
        "status": "healthy",
        "products": len(session.products),
        "articles": len(session.articles),
        "comments": len(session.comments),
        "loaded": {
            "products": session.products_loaded,
            "articles": session.articles_loaded,
            "comments": session.comments_loaded,
        },
        "revision": session.revision,
        "mock_advice": settings.mock_advice,
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=settings.debug_mode)
