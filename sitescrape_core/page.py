#!/usr/bin/env python3
"""
Live page adapters.

The dispatcher acts on "the current page" through this small interface:

    page.url                          -> str
    await page.get_title()            -> str
    await page.snapshot()             -> SoupDocument (fresh, detached parse)
    await page.set_heading_color(c)   -> number of headings updated

StaticPage holds HTML in memory (files, tests). PlaywrightPage wraps a
Playwright async Page. Snapshots are detached copies: scraping never reads
or mutates the browser DOM directly.
"""
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional, Protocol

from .config import config
from .dom import SoupDocument, parse_html

logger = logging.getLogger(__name__)

HEADING_TAGS = ["h1", "h2", "h3"]
SPECIAL_PREFIXES = ("chrome://", "chrome-extension://", "edge://", "about:")


def is_special_page(url: Optional[str]) -> bool:
    if not url:
        return True
    return url.startswith(SPECIAL_PREFIXES)


class LivePage(Protocol):
    url: str

    async def get_title(self) -> str: ...

    async def snapshot(self) -> SoupDocument: ...

    async def set_heading_color(self, color: Optional[str]) -> int: ...


def _restyle(style: str, color: Optional[str]) -> str:
    declarations = [d.strip() for d in (style or "").split(";") if d.strip()]
    declarations = [d for d in declarations if d.split(":", 1)[0].strip().lower() != "color"]
    if color is not None:
        declarations.append(f"color: {color}")
    return "; ".join(declarations)


class StaticPage:
    """In-memory page backed by an HTML string"""

    def __init__(self, html: str, url: str = ""):
        self.url = url
        self.document = parse_html(html, url=url)

    async def get_title(self) -> str:
        return self.document.title

    async def snapshot(self) -> SoupDocument:
        return parse_html(str(self.document.soup), url=self.url)

    async def set_heading_color(self, color: Optional[str]) -> int:
        headings = self.document.soup.find_all(HEADING_TAGS)
        for tag in headings:
            style = _restyle(tag.get("style", ""), color)
            if style:
                tag["style"] = style
            elif "style" in tag.attrs:
                del tag["style"]
        return len(headings)


SET_HEADING_COLOR_JS = """
(color) => {
    const headings = document.querySelectorAll('h1, h2, h3');
    headings.forEach(h => { h.style.color = color === null ? '' : color; });
    return headings.length;
}
"""


class PlaywrightPage:
    """Adapter over playwright.async_api.Page"""

    def __init__(self, page):
        self.page = page

    @property
    def url(self) -> str:
        return self.page.url

    async def get_title(self) -> str:
        return await self.page.title()

    async def snapshot(self) -> SoupDocument:
        html = await self.page.content()
        return parse_html(html, url=self.page.url)

    async def set_heading_color(self, color: Optional[str]) -> int:
        count = await self.page.evaluate(SET_HEADING_COLOR_JS, color)
        return int(count or 0)


@asynccontextmanager
async def open_browser_page(url: str, headless: Optional[bool] = None) -> AsyncIterator[PlaywrightPage]:
    """Launch Chromium, open `url` and yield it as a PlaywrightPage"""
    from playwright.async_api import async_playwright

    if headless is None:
        headless = config.headless

    playwright = await async_playwright().start()
    browser = None
    try:
        browser = await playwright.chromium.launch(
            headless=headless,
            args=["--no-sandbox", "--disable-dev-shm-usage"],
        )
        context = await browser.new_context(user_agent=config.user_agent)
        page = await context.new_page()
        logger.info(f"Opening {url}")
        await page.goto(url, wait_until="domcontentloaded")
        yield PlaywrightPage(page)
    finally:
        if browser is not None:
            await browser.close()
        await playwright.stop()
