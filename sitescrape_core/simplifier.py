"""
HTML Simplifier - shrink a page to the structure an LLM needs to infer selectors.

Removes non-structural elements and comments, keeps only the attributes
that matter for selector construction (class, id, href, data-id), collapses
whitespace and caps the output length. Content past the cap is lost for
that call: the LLM only sees the top of the page.
"""

import copy
import logging
import re
from typing import Union

from bs4 import Comment

from .config import config
from .dom import SoupDocument, parse_html

logger = logging.getLogger(__name__)

REMOVED_TAGS = ['script', 'style', 'svg', 'img', 'noscript', 'iframe', 'video', 'audio', 'canvas', 'link', 'meta']
ALLOWED_ATTRIBUTES = {'class', 'id', 'href', 'data-id'}

MAX_SIMPLIFIED_LENGTH = config.max_simplified_chars
MIN_SIMPLIFIED_LENGTH = config.min_simplified_chars
TRUNCATION_MARKER = "\n<!-- ... HTML truncated ... -->"

_WHITESPACE_RE = re.compile(r"\s+")
_BETWEEN_TAGS_RE = re.compile(r">\s+<")


def simplify_html(document: Union[SoupDocument, str], max_length: int = MAX_SIMPLIFIED_LENGTH) -> str:
    """Return compact, attribute-pruned HTML of the document body. Never raises."""
    try:
        if isinstance(document, str):
            document = parse_html(document)
        root = document.soup.body if document.soup.body is not None else document.soup
        # Work on a copy; the caller's document is left untouched
        clone = copy.copy(root)

        for tag in clone.find_all(REMOVED_TAGS):
            tag.decompose()

        for comment in clone.find_all(string=lambda s: isinstance(s, Comment)):
            comment.extract()

        for tag in clone.find_all(True):
            tag.attrs = {k: v for k, v in tag.attrs.items() if k.lower() in ALLOWED_ATTRIBUTES}

        html = clone.decode_contents()
    except Exception as e:
        logger.warning(f"HTML simplification failed: {e}")
        return ""

    html = _WHITESPACE_RE.sub(" ", html)
    html = _BETWEEN_TAGS_RE.sub("><", html)

    if len(html) > max_length:
        logger.debug(f"Simplified HTML truncated from {len(html)} to {max_length} chars")
        html = html[:max_length] + TRUNCATION_MARKER

    return html
