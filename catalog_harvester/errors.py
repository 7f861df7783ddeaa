from __future__ import annotations

from typing import Optional


class HarvestError(Exception):
    """Base class for every error the harvester raises on purpose."""


class RateLimitExceeded(HarvestError):
    """The limiter had no permit left in the current window."""

    def __init__(self, retry_after: float) -> None:
        super().__init__(f"rate limit exceeded; retry in {retry_after:.2f}s")
        self.retry_after = retry_after


class FetchError(HarvestError):
    """Transport or HTTP failure while downloading a page."""

    def __init__(self, url: str, status: Optional[int] = None, reason: str = "") -> None:
        detail = f"HTTP {status}" if status is not None else (reason or "transport error")
        super().__init__(f"failed to fetch {url}: {detail}")
        self.url = url
        self.status = status
        self.reason = reason


class ParseError(HarvestError):
    """A page was fetched but did not have the expected markup."""

    def __init__(self, url: str, reason: str) -> None:
        super().__init__(f"unexpected markup at {url}: {reason}")
        self.url = url
        self.reason = reason


class StoreError(HarvestError):
    """Base class for persistence failures."""


class DuplicateKey(StoreError):
    """An insert collided with the unique title index."""

    def __init__(self, title: str) -> None:
        super().__init__(f"duplicate title: {title!r}")
        self.title = title


class StoreUnavailable(StoreError):
    """The store could not be reached or refused a batch as a whole."""
