#!/usr/bin/env python3
"""
Background page fetcher.

fetch(url) never raises: failures come back as FetchResult(success=False,
error=...) and the caller surfaces the message as-is. No retries.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional

import aiohttp

from .config import config

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    success: bool
    html: str = ""
    error: str = ""


def default_headers() -> Dict[str, str]:
    return {
        "User-Agent": config.user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": config.accept_language,
    }


class PageFetcher:
    """Fetch HTML over HTTP with browser-like headers"""

    def __init__(self, timeout: Optional[int] = None, headers: Optional[Dict[str, str]] = None):
        self.timeout = timeout if timeout is not None else config.fetch_timeout
        self.headers = headers or default_headers()

    async def fetch(self, url: str) -> FetchResult:
        timeout_obj = aiohttp.ClientTimeout(total=self.timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout_obj, headers=self.headers) as session:
                async with session.get(url) as resp:
                    if resp.status < 200 or resp.status >= 300:
                        logger.info(f"Fetch {url} -> HTTP {resp.status}")
                        return FetchResult(success=False, error=f"HTTP {resp.status}: {resp.reason}")
                    html = await resp.text(errors="replace")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"Fetch {url} failed: {e!r}")
            return FetchResult(success=False, error=f"Failed to fetch page: {str(e) or type(e).__name__}")
        logger.debug(f"Fetched {url} ({len(html)} chars)")
        return FetchResult(success=True, html=html)
