from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple

from aiohttp import ClientSession

from .adapters.base import SiteAdapter
from .adapters.books import BooksToScrapeAdapter
from .config import HarvestConfig
from .engines.base import CatalogCursor, CrawlReport
from .engines.page_fetcher import PageFetcher
from .engines.paged_engine import PagedCrawlEngine
from .reconcile.reconciler import ReconcileResult, Reconciler
from .utils.http import create_session
from .utils.loader import load_symbol
from .utils.ratelimit import RateLimiter

logger = logging.getLogger(__name__)


@dataclass
class HarvestSummary:
    pages_attempted: int = 0
    pages_skipped: int = 0
    items_scraped: int = 0
    inserted: int = 0
    updated: int = 0
    unchanged: int = 0
    duplicates: int = 0
    write_failures: int = 0
    aborted: bool = False

    @classmethod
    def from_results(cls, report: CrawlReport, result: ReconcileResult) -> "HarvestSummary":
        return cls(
            pages_attempted=report.pages_attempted,
            pages_skipped=report.pages_skipped,
            items_scraped=len(report.items),
            inserted=result.inserted,
            updated=result.updated,
            unchanged=result.unchanged,
            duplicates=result.duplicates,
            write_failures=result.failed - result.duplicates,
            aborted=result.aborted,
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def open_store(cfg: HarvestConfig):
    """
    Build the configured store and check it is reachable.
    Raises StoreUnavailable when it is not.
    """
    store_cls = load_symbol(cfg.store)
    store = store_cls.from_config(cfg)
    try:
        store.ping()
        store.ensure_indexes()
    except Exception:
        store.close()
        raise
    return store


async def crawl_catalog(
    cfg: HarvestConfig,
    *,
    session: Optional[ClientSession] = None,
    limiter: Optional[RateLimiter] = None,
    adapter: Optional[SiteAdapter] = None,
    cursor: Optional[CatalogCursor] = None,
) -> CrawlReport:
    """Crawl ``cfg.start_page``..``cfg.end_page`` with a fresh cursor unless one is given."""
    limiter = limiter or RateLimiter(
        cfg.rate_limit_points, cfg.rate_limit_interval, cfg.rate_limit_max_delay
    )
    own_session = session is None
    session = session or create_session()
    try:
        fetcher = PageFetcher(
            session,
            limiter,
            adapter or BooksToScrapeAdapter(),
            base_url=cfg.base_url,
            page_suffix=cfg.page_suffix,
            timeout=cfg.request_timeout,
            user_agent=cfg.user_agent,
        )
        engine = PagedCrawlEngine(fetcher, default_page_limit=cfg.default_page_limit)
        return await engine.crawl(cfg.start_page, cfg.end_page, cursor)
    finally:
        if own_session:
            await session.close()


async def run_harvest(cfg: HarvestConfig, store, **crawl_kwargs: Any) -> Tuple[CrawlReport, ReconcileResult]:
    """One crawl-and-reconcile pass. Per-page and per-write failures never raise."""
    report = await crawl_catalog(cfg, **crawl_kwargs)
    logger.info("Scraped %s items in total.", len(report.items))
    # pymongo is blocking; keep the event loop free for the API server.
    result = await asyncio.to_thread(Reconciler(store).reconcile, report.items)
    return report, result
