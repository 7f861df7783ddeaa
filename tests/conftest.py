"""
Pytest fixtures and fakes for harvester tests. Nothing here touches the network.
"""
from typing import Dict, List, Optional, Sequence, Tuple

import aiohttp
import pytest

from catalog_harvester.config import HarvestConfig
from catalog_harvester.utils.ratelimit import RateLimiter

BASE_URL = "http://books.test/catalogue/page-"


def product_pod(title: str, price: str, label: Optional[str] = "Three") -> str:
    star = f'<p class="star-rating {label}"><i class="icon-star"></i></p>' if label is not None else ""
    return f"""
    <li class="col-xs-6">
      <article class="product_pod">
        <div class="image_container"><a href="x.html"><img src="x.jpg" alt="{title}"></a></div>
        {star}
        <h3><a href="x.html" title="{title}">{title[:10]}...</a></h3>
        <div class="product_price">
          <p class="price_color">{price}</p>
          <p class="instock availability">In stock</p>
        </div>
      </article>
    </li>"""


def catalog_page(books: Sequence[Tuple[str, str, Optional[str]]], page: int = 1, total: Optional[int] = 3) -> str:
    pods = "".join(product_pod(*b) for b in books)
    pager = ""
    if total is not None:
        pager = f"""
        <ul class="pager">
          <li class="current">
              Page {page} of {total}
          </li>
        </ul>"""
    return f"""<html><body><section>
      <ol class="row">{pods}</ol>
      <div>{pager}</div>
    </section></body></html>"""


class FakeClock:
    """Monotonic clock that only moves when something sleeps."""

    def __init__(self) -> None:
        self.now = 0.0
        self.sleeps: List[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, delay: float) -> None:
        self.sleeps.append(delay)
        self.now += delay


class FakeResponse:
    def __init__(self, body: str, status: int = 200) -> None:
        self.body = body
        self.status = status

    async def __aenter__(self) -> "FakeResponse":
        return self

    async def __aexit__(self, *exc) -> None:
        return None

    def raise_for_status(self) -> None:
        if self.status >= 400:
            raise aiohttp.ClientResponseError(None, (), status=self.status, message="error")

    async def text(self) -> str:
        return self.body


class BadlyEncodedResponse(FakeResponse):
    """Declares utf-8 but carries bytes that are not."""

    def __init__(self) -> None:
        super().__init__("")

    async def text(self) -> str:
        raise UnicodeDecodeError("utf-8", b"<html>\xff\xfe\xfa bad</html>", 6, 7, "invalid start byte")


class FakeSession:
    """
    Maps URLs to HTML bodies. Unknown URLs answer 404; URLs mapped to an
    exception raise it from ``get``.
    """

    def __init__(self, pages: Dict[str, object], clock: Optional[FakeClock] = None) -> None:
        self.pages = pages
        self.clock = clock
        self.requests: List[str] = []
        self.request_times: List[float] = []
        self.closed = False

    def get(self, url: str, headers=None, timeout=None) -> FakeResponse:
        self.requests.append(url)
        if self.clock is not None:
            self.request_times.append(self.clock())
        body = self.pages.get(url)
        if isinstance(body, FakeResponse):
            return body
        if isinstance(body, Exception):
            raise body
        if body is None:
            return FakeResponse("not found", status=404)
        return FakeResponse(str(body))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    # Always wait the minimum so timings are predictable.
    return RateLimiter(1, 2.0, 6.0, clock=clock, sleep=clock.sleep, uniform=lambda lo, hi: lo)


@pytest.fixture
def three_pages():
    return {
        f"{BASE_URL}1.html": catalog_page([("A Light in the Attic", "£51.77", "Three"), ("Tipping the Velvet", "£53.74", "One")], 1),
        f"{BASE_URL}2.html": catalog_page([("Soumission", "£50.10", "One")], 2),
        f"{BASE_URL}3.html": catalog_page([("Sharp Objects", "£47.82", "Four")], 3),
    }


@pytest.fixture
def config():
    return HarvestConfig(
        base_url=BASE_URL,
        start_page=1,
        end_page=3,
        store="catalog_harvester.store.memory:InMemoryItemStore",
    )
