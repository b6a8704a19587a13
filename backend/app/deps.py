from functools import lru_cache, partial
from typing import Optional

from fastapi import Depends, HTTPException, status

from web_scraping.scrape.cache import ProductCache, SqliteProductCache, SupabaseProductCache
from web_scraping.scrape.fetcher import fetch_html
from web_scraping.scrape.scrape import ScrapeOrchestrator

from .config import Settings, get_settings
from .supabase_client import get_supabase


def build_cache(settings: Settings) -> Optional[ProductCache]:
    if not settings.use_database:
        return None
    if settings.cache_backend == "supabase":
        return SupabaseProductCache(get_supabase(), table=settings.supabase_table)
    return SqliteProductCache(settings.sqlite_path)


def build_orchestrator(settings: Settings, cache: Optional[ProductCache]) -> ScrapeOrchestrator:
    fetch = partial(
        fetch_html,
        timeout=settings.fetch_timeout,
        retries=settings.fetch_retries,
        user_agent=settings.user_agent,
    )
    # the overall bound covers every attempt plus fetch_html's backoff sleeps
    backoff = sum(1.0 + a for a in range(settings.fetch_retries))
    return ScrapeOrchestrator(
        cache=cache,
        fetch=fetch,
        max_concurrency=settings.max_concurrency,
        fetch_timeout=settings.fetch_timeout * (settings.fetch_retries + 1) + backoff,
    )


@lru_cache()
def _cache_singleton() -> Optional[ProductCache]:
    return build_cache(get_settings())


def get_cache() -> Optional[ProductCache]:
    try:
        return _cache_singleton()
    except Exception as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Product cache initialization failed",
        ) from exc


def require_cache(cache: Optional[ProductCache] = Depends(get_cache)) -> ProductCache:
    if cache is None:
        raise HTTPException(status_code=status.HTTP_501_NOT_IMPLEMENTED, detail="DB not enabled")
    return cache


@lru_cache()
def get_orchestrator() -> ScrapeOrchestrator:
    return build_orchestrator(get_settings(), get_cache())
