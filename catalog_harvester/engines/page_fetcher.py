from __future__ import annotations

import logging
from typing import Optional

from aiohttp import ClientSession

from ..adapters.base import PageResult, SiteAdapter
from ..utils.http import fetch_text
from ..utils.ratelimit import RateLimiter

logger = logging.getLogger(__name__)


class PageFetcher:
    """
    Downloads and parses one catalog page.
    Every request goes through the limiter first; a denied permit means no request.
    """

    def __init__(
        self,
        session: ClientSession,
        limiter: RateLimiter,
        adapter: SiteAdapter,
        *,
        base_url: str,
        page_suffix: str = ".html",
        timeout: float = 15.0,
        user_agent: Optional[str] = None,
    ) -> None:
        self.session = session
        self.limiter = limiter
        self.adapter = adapter
        self.base_url = base_url
        self.page_suffix = page_suffix
        self.timeout = timeout
        self.user_agent = user_agent

    def page_url(self, page: int) -> str:
        return f"{self.base_url}{page}{self.page_suffix}"

    async def fetch_page(self, page: int, *, discover_total: bool = False) -> PageResult:
        url = self.page_url(page)
        await self.limiter.acquire()
        html = await fetch_text(
            self.session,
            url,
            timeout=self.timeout,
            user_agent=self.user_agent,
        )

        items = self.adapter.parse_items(url, html)
        total_pages = None
        if discover_total:
            total_pages = self.adapter.parse_total_pages(url, html, page)
        logger.debug("Page %s yielded %s items", page, len(items))
        return PageResult(page=page, items=items, total_pages=total_pages)
