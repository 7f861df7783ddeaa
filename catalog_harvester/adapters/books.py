from __future__ import annotations

from typing import Dict, List

from bs4 import BeautifulSoup
from bs4.element import Tag

from .base import ItemRecord
from ..errors import ParseError

RATING_LABELS: Dict[str, int] = {
    "One": 1,
    "Two": 2,
    "Three": 3,
    "Four": 4,
    "Five": 5,
}


def rating_from_label(label: str) -> int:
    """Map a star label to 1..5; anything unrecognized is 0."""
    return RATING_LABELS.get(label, 0)


class BooksToScrapeAdapter:
    """Parses the listing pages of books.toscrape.com."""

    name = "books-to-scrape"

    def parse_items(self, url: str, html: str) -> List[ItemRecord]:
        soup = BeautifulSoup(html, "html.parser")
        pods = soup.select(".product_pod")
        if not pods:
            raise ParseError(url, "no .product_pod containers")
        return [self._item_from_pod(url, pod) for pod in pods]

    def parse_total_pages(self, url: str, html: str, page: int) -> int:
        soup = BeautifulSoup(html, "html.parser")
        current = soup.select_one(".current")
        if current is None:
            # No pager at all: the whole catalog fits on this page.
            return page
        # "Page 1 of 50"
        parts = current.get_text().strip().split()
        try:
            return int(parts[3])
        except (IndexError, ValueError) as exc:
            raise ParseError(url, f"unreadable pager text {current.get_text().strip()!r}") from exc

    # ---- Extraction helpers -------------------------------------------------

    def _item_from_pod(self, url: str, pod: Tag) -> ItemRecord:
        anchor = pod.select_one("h3 a")
        title = anchor.get("title") if anchor is not None else None
        if not title:
            raise ParseError(url, "product container without a titled h3 anchor")

        price_tag = pod.select_one(".price_color")
        if price_tag is None:
            raise ParseError(url, f"no .price_color for {title!r}")

        return ItemRecord(
            title=title,
            price=price_tag.get_text(),
            rating=rating_from_label(self._rating_label(pod)),
        )

    @staticmethod
    def _rating_label(pod: Tag) -> str:
        star = pod.select_one(".star-rating")
        if star is None:
            return ""
        classes = [c for c in star.get("class", []) if c != "star-rating"]
        return classes[0] if classes else ""
