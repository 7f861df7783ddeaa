from __future__ import annotations

import asyncio
from typing import Optional
from aiohttp import ClientSession, ClientTimeout
import aiohttp
import logging

from ..errors import FetchError

logger = logging.getLogger(__name__)


async def fetch_text(
    session: ClientSession,
    url: str,
    *,
    timeout: float = 15.0,
    user_agent: Optional[str] = None,
) -> str:
    """
    Fetch a URL once and return the body text.
    Raises FetchError on any transport, timeout, HTTP status or decoding failure.
    """
    headers = {}
    if user_agent:
        headers["User-Agent"] = user_agent

    logger.debug("GET %s", url)
    try:
        async with session.get(url, headers=headers, timeout=ClientTimeout(total=timeout)) as resp:
            resp.raise_for_status()
            return await resp.text()
    except aiohttp.ClientResponseError as exc:
        raise FetchError(url, status=exc.status) from exc
    except asyncio.TimeoutError as exc:
        raise FetchError(url, reason=f"timed out after {timeout}s") from exc
    except aiohttp.ClientError as exc:
        raise FetchError(url, reason=repr(exc)) from exc
    except UnicodeDecodeError as exc:
        raise FetchError(url, reason=f"body is not valid {exc.encoding}") from exc


def create_session() -> ClientSession:
    """
    Create the aiohttp ClientSession shared by one crawl.
    """
    # Note: caller is responsible for closing the session (await session.close()).
    # Pages are fetched one at a time, so a single connection is enough.
    connector = aiohttp.TCPConnector(limit=1)
    return aiohttp.ClientSession(connector=connector)
