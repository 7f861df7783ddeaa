from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional
from abc import ABC, abstractmethod

from ..adapters.base import ItemRecord
from ..errors import HarvestError


@dataclass
class CatalogCursor:
    """
    Per-crawl paging state. ``page_limit`` starts as a guess and is corrected
    once, from the first page that reports the catalog size.
    """
    page_limit: int = 100
    page_limit_known: bool = False

    def record_page_limit(self, total_pages: int) -> bool:
        """Store the discovered limit. Returns False if it was already known."""
        if self.page_limit_known:
            return False
        self.page_limit = total_pages
        self.page_limit_known = True
        return True


@dataclass
class PageFailure:
    page: int
    error: HarvestError

    @property
    def kind(self) -> str:
        return type(self.error).__name__


@dataclass
class CrawlReport:
    items: List[ItemRecord] = field(default_factory=list)
    cursor: CatalogCursor = field(default_factory=CatalogCursor)
    pages_attempted: int = 0
    failures: List[PageFailure] = field(default_factory=list)

    @property
    def pages_fetched(self) -> int:
        return self.pages_attempted - len(self.failures)

    @property
    def pages_skipped(self) -> int:
        return len(self.failures)


class CrawlEngine(ABC):
    """
    Abstract engine interface. Implementations own the crawl lifecycle.
    """
    @abstractmethod
    async def crawl(
        self, start_page: int, end_page: int, cursor: Optional[CatalogCursor] = None
    ) -> CrawlReport:  # pragma: no cover - interface
        ...
