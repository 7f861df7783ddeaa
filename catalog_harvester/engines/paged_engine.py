from __future__ import annotations

import logging
from typing import Optional

from .base import CatalogCursor, CrawlEngine, CrawlReport, PageFailure
from .page_fetcher import PageFetcher
from ..errors import HarvestError

logger = logging.getLogger(__name__)


class PagedCrawlEngine(CrawlEngine):
    """
    Walks a numbered page range one page at a time.
    - Fetcher owns HTTP, throttling and parsing.
    - Engine owns the range, page-count discovery and failure isolation.
    """
    def __init__(self, fetcher: PageFetcher, default_page_limit: int = 100) -> None:
        self.fetcher = fetcher
        self.default_page_limit = default_page_limit

    async def crawl(
        self, start_page: int, end_page: int, cursor: Optional[CatalogCursor] = None
    ) -> CrawlReport:
        if start_page < 1:
            raise ValueError("start_page must be >= 1")
        if cursor is None:
            cursor = CatalogCursor(page_limit=self.default_page_limit)

        report = CrawlReport(cursor=cursor)
        # Clamped once; a limit discovered mid-crawl does not shrink the range.
        upper_bound = min(end_page, cursor.page_limit)
        if start_page > upper_bound:
            logger.info("Nothing to crawl: start page %s is past %s", start_page, upper_bound)
            return report

        for page in range(start_page, upper_bound + 1):
            report.pages_attempted += 1
            if cursor.page_limit_known:
                logger.info("Scraping page %s of %s", page, cursor.page_limit)
            else:
                logger.info("Scraping page %s", page)

            try:
                result = await self.fetcher.fetch_page(
                    page, discover_total=not cursor.page_limit_known
                )
            except HarvestError as exc:
                logger.warning("Error scraping page %s: %s", page, exc)
                report.failures.append(PageFailure(page=page, error=exc))
                continue

            if result.total_pages is not None and cursor.record_page_limit(result.total_pages):
                logger.debug("Catalog has %s pages", cursor.page_limit)
            report.items.extend(result.items)

        logger.info(
            "Scraped %s items from %s/%s pages",
            len(report.items), report.pages_fetched, report.pages_attempted,
        )
        return report
