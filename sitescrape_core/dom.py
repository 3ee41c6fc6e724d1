"""
Minimal DOM capability layer over BeautifulSoup.

The extraction engine only needs: select (all matches, document order),
select_one, text and attribute access. Anything that offers these can be
scraped, so tests can use plain HTML strings and the live browser page is
snapshotted into the same shape.
"""

import logging
from typing import List, Optional, Union

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from .errors import SelectorError

logger = logging.getLogger(__name__)

HTML_PARSER = "html.parser"


class SoupElement:
    """Element handle wrapping a bs4 Tag"""

    def __init__(self, tag: Union[Tag, BeautifulSoup]):
        self.tag = tag

    def select(self, selector: str) -> List["SoupElement"]:
        try:
            return [SoupElement(t) for t in self.tag.select(selector)]
        except SelectorSyntaxError as e:
            raise SelectorError(f"Invalid CSS selector {selector!r}: {e}") from e

    def select_one(self, selector: str) -> Optional["SoupElement"]:
        try:
            found = self.tag.select_one(selector)
        except SelectorSyntaxError as e:
            raise SelectorError(f"Invalid CSS selector {selector!r}: {e}") from e
        return SoupElement(found) if found is not None else None

    @property
    def text(self) -> str:
        """Equivalent of DOM textContent (untrimmed)"""
        return self.tag.get_text()

    def attr(self, name: str) -> str:
        value = self.tag.get(name)
        if value is None:
            return ""
        if isinstance(value, list):
            return " ".join(value)
        return str(value)

    @property
    def name(self) -> str:
        return self.tag.name or ""

    @property
    def inner_html(self) -> str:
        return self.tag.decode_contents()

    def __repr__(self) -> str:
        return f"<SoupElement {self.name}>"


class SoupDocument(SoupElement):
    """A parsed, detached document"""

    def __init__(self, soup: BeautifulSoup, url: str = ""):
        super().__init__(soup)
        self.soup = soup
        self.url = url

    @property
    def title(self) -> str:
        if self.soup.title is None:
            return ""
        return self.soup.title.get_text().strip()

    @property
    def body(self) -> Optional[SoupElement]:
        if self.soup.body is None:
            return None
        return SoupElement(self.soup.body)


def parse_html(html: str, url: str = "") -> SoupDocument:
    """Parse an HTML string into a detached document (never touches a live page)"""
    return SoupDocument(BeautifulSoup(html or "", HTML_PARSER), url=url)
