from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol


@dataclass(frozen=True)
class ItemRecord:
    """One catalog item. ``title`` is the natural key across runs."""

    title: str
    price: str
    rating: int = 0

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("title must be non-empty")
        if not 0 <= self.rating <= 5:
            raise ValueError(f"rating must be within 0..5, got {self.rating}")

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "price": self.price, "rating": self.rating}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ItemRecord":
        """
        Build a record from a stored document. A rating that is not an integer
        in 0..5 reads as 0, so the next scrape rewrites it instead of failing.
        """
        return cls(
            title=data["title"],
            price=str(data.get("price") or ""),
            rating=_stored_rating(data.get("rating")),
        )

    def same_values(self, other: "ItemRecord") -> bool:
        return self.price == other.price and self.rating == other.rating


@dataclass
class PageResult:
    page: int
    items: List[ItemRecord] = field(default_factory=list)
    # Only set when the caller asked for page-count discovery.
    total_pages: Optional[int] = None


class SiteAdapter(Protocol):
    """
    Interface for site-specific parsing logic.
    Engine owns the HTTP, throttling and paging; adapters only read markup.
    """

    name: str

    def parse_items(self, url: str, html: str) -> List[ItemRecord]:
        """Return the page's items in document order, or raise ParseError."""
        ...

    def parse_total_pages(self, url: str, html: str, page: int) -> int:
        """Return the catalog's last page number, or raise ParseError."""
        ...


def _stored_rating(value: Any) -> int:
    try:
        rating = int(value or 0)
    except (TypeError, ValueError):
        return 0
    return rating if 0 <= rating <= 5 else 0
