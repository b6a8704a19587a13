import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Sequence, Union

from .cache import ProductCache, key_for
from .discover import discover
from .document import Document
from .extractor import extract
from .fetcher import DEFAULT_TIMEOUT, fetch_html
from .profiles import match_profile
from .schema import ProductRecord

logger = logging.getLogger(__name__)

RawInput = Union[str, Sequence[str], None]


class EmptyInputError(ValueError):
    """Raised when a scrape request carries no input at all."""


def build_record(url: str, html: str, workspace_id: str) -> ProductRecord:
    profile = match_profile(url)
    fields = extract(Document(html), profile)
    return ProductRecord(id=key_for(url), url=url, workspace_id=workspace_id, **fields)


class ScrapeOrchestrator:
    """
    Discover URLs in raw input, then resolve each one from the cache or by
    fetching and extracting it. URLs run concurrently up to max_concurrency and
    results come back in discovery order, one per URL. A failing URL becomes an
    error record and never aborts the rest of the batch.
    """

    def __init__(
        self,
        cache: Optional[ProductCache] = None,
        fetch: Callable[[str], str] = fetch_html,
        max_concurrency: int = 3,
        fetch_timeout: float = DEFAULT_TIMEOUT,
    ):
        self.cache = cache
        self.fetch = fetch
        self.max_concurrency = max(1, max_concurrency)
        self.fetch_timeout = fetch_timeout

    async def _lookup(self, id: str, url: str, workspace_id: str) -> Optional[ProductRecord]:
        if self.cache is None:
            return None
        try:
            return await asyncio.to_thread(self.cache.get, id, workspace_id)
        except Exception:
            logger.exception("[CACHE] lookup failed for %s, treating as miss", url)
            return None

    async def _store(self, record: ProductRecord) -> ProductRecord:
        if self.cache is None:
            return record
        stamped = record.model_copy(update={"updated_at": datetime.now(timezone.utc)})
        try:
            stored = await asyncio.to_thread(self.cache.put, stamped)
        except Exception:
            logger.exception("[CACHE] write failed for %s", record.url)
            stored = False
        return stamped if stored else record

    async def process(self, url: str, workspace_id: str) -> ProductRecord:
        id = key_for(url)

        cached = await self._lookup(id, url, workspace_id)
        if cached is not None:
            logger.info("[CACHE HIT] %s", url)
            return cached

        try:
            logger.info("[SCRAPING] %s", url)
            html = await asyncio.wait_for(asyncio.to_thread(self.fetch, url), timeout=self.fetch_timeout)
            record = await asyncio.to_thread(build_record, url, html, workspace_id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning("Failed to scrape %s: %s: %s", url, type(e).__name__, e)
            record = ProductRecord.error_stub(id, url, workspace_id)

        return await self._store(record)

    async def scrape_batch(self, raw: RawInput, workspace_id: str = "default") -> List[ProductRecord]:
        if not raw:
            raise EmptyInputError("Invalid input.")

        urls = discover(raw)
        if not urls:
            return []

        sem = asyncio.Semaphore(self.max_concurrency)

        async def safe_process(url: str) -> ProductRecord:
            async with sem:
                logger.info("[JOB] FETCH → %s", url)
                rec = await self.process(url, workspace_id)
                if rec.error:
                    logger.info("[JOB] ERR  → %s | %s", url, rec.error)
                else:
                    logger.info("[JOB] OK   → %s | %s | %s", rec.id, rec.title, rec.price)
                return rec

        # gather keeps argument order, so results line up with discovery order
        return list(await asyncio.gather(*(safe_process(u) for u in urls)))

    def scrape_batch_sync(self, raw: RawInput, workspace_id: str = "default") -> List[ProductRecord]:
        return asyncio.run(self.scrape_batch(raw, workspace_id))
